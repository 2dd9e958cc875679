import pytest

from tictactoe_sync.game_logic import (
    WIN_LINES, GameState, apply_move, calculate_winner, game_status,
    index_to_cell, is_move_allowed, reset_state, status_text,
)

X, O, _ = "X", "O", None


def play(*indices):
    state = GameState.initial()
    for i in indices:
        state = apply_move(state, i)
    return state


@pytest.mark.parametrize("line", WIN_LINES)
def test_every_line_is_detected(line):
    board = [_] * 9
    for i in line:
        board[i] = O
    assert calculate_winner(board) == (O, line)


def test_first_line_wins_on_malformed_board():
    # row 0 and col 0 both complete; rows come first
    board = [X, X, X,
             X, O, O,
             X, O, O]
    assert calculate_winner(board) == (X, (0, 1, 2))
    # col 2 and diagonal (2,4,6) both complete; cols come first
    board = [_, O, X,
             O, X, X,
             X, O, X]
    assert calculate_winner(board) == (X, (2, 5, 8))


def test_full_board_without_line_is_draw():
    board = [X, O, X,
             X, O, O,
             O, X, X]
    status = game_status(board)
    assert status.is_draw and status.winner is None
    assert status.is_over
    assert status_text(status) == "Draw"


def test_win_on_last_cell_is_not_draw():
    board = [X, O, X,
             O, X, O,
             O, X, X]
    status = game_status(board, x_is_next=False)
    assert status.winner == X
    assert status.line == (0, 4, 8)
    assert not status.is_draw
    assert status_text(status) == "Winner: X"


@pytest.mark.parametrize("x_is_next,mark", [(True, X), (False, O)])
def test_in_progress_reports_next_mark(x_is_next, mark):
    status = game_status([X, _, _, _, O, _, _, _, _], x_is_next)
    assert status.next_mark == mark
    assert not status.is_over
    assert status_text(status) == f"Next player: {mark}"


def test_turn_alternates():
    state = GameState.initial()
    assert state.current_mark == X
    state = apply_move(state, 0)
    assert state.current_mark == O
    state = apply_move(state, 5)
    assert state.current_mark == X
    assert state.squares[0] == X and state.squares[5] == O


def test_row_win_scenario():
    state = play(0, 3, 1, 4, 2)
    assert state.squares == (X, X, X, O, O, _, _, _, _)
    assert calculate_winner(state.squares) == (X, (0, 1, 2))


def test_occupied_cell_is_rejected():
    state = play(4)
    assert not is_move_allowed(state, 4)
    assert apply_move(state, 4) is state


def test_moves_after_game_over_are_rejected():
    state = play(0, 3, 1, 4, 2)
    assert not is_move_allowed(state, 8)
    assert apply_move(state, 8) is state


@pytest.mark.parametrize("index", [-1, 9, "4", None, True, False])
def test_out_of_range_index_is_rejected(index):
    state = GameState.initial()
    assert apply_move(state, index) is state


def test_reset_is_idempotent():
    assert reset_state() == reset_state() == GameState.initial()


def test_index_to_cell_is_row_major():
    assert index_to_cell(0) == (0, 0)
    assert index_to_cell(5) == (1, 2)
    assert index_to_cell(7) == (2, 1)

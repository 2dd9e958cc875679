from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# rows, then cols, then diagonals -- first match wins
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

EMPTY_BOARD = (None,) * CELL_COUNT


class GameStatus(NamedTuple):
    """
    derived status: in progress, won or draw
    """
    next_mark: Optional[str] = None
    winner: Optional[str] = None
    line: Optional[Tuple[int, int, int]] = None
    is_draw: bool = False

    @property
    def is_over(self):
        return self.winner is not None or self.is_draw


def calculate_winner(board):
    """
    scan the 8 lines in order
    returns: (mark, line) for the first complete line, else None
    """
    for line in WIN_LINES:
        a, b, c = line
        if board[a] and board[a] == board[b] == board[c]:
            return board[a], line
    return None


def game_status(board, x_is_next=True) -> GameStatus:
    """
    winner beats draw, draw only on a full board
    """
    won = calculate_winner(board)
    if won:
        mark, line = won
        return GameStatus(winner=mark, line=line)
    if all(board):
        return GameStatus(is_draw=True)
    return GameStatus(next_mark="X" if x_is_next else "O")


def status_text(status: GameStatus) -> str:
    # labels shown in the status line
    if status.winner:
        return f"Winner: {status.winner}"
    if status.is_draw:
        return "Draw"
    return f"Next player: {status.next_mark}"


def index_to_cell(index):
    """
    flat index -> (row, col)
    """
    return divmod(index, BOARD_SIZE)


@dataclass(frozen=True)
class GameState:
    """
    9-cell board plus whose turn it is; winner/draw are always derived
    """
    squares: Tuple[Optional[str], ...] = EMPTY_BOARD
    x_is_next: bool = True

    @classmethod
    def initial(cls):
        # empty board, X to move
        return cls()

    @classmethod
    def from_remote(cls, remote):
        """
        adopt a remote snapshot wholesale, never merged cell by cell
        """
        return cls(squares=tuple(remote.squares), x_is_next=remote.x_is_next)

    @property
    def current_mark(self):
        return "X" if self.x_is_next else "O"

    @property
    def status(self) -> GameStatus:
        return game_status(self.squares, self.x_is_next)


def is_move_allowed(state: GameState, index) -> bool:
    """
    guard shared by local and remote moves
    """
    # bool is an int subclass, never a cell
    if not isinstance(index, int) or isinstance(index, bool):
        return False
    if not 0 <= index < CELL_COUNT:
        return False
    if state.squares[index] is not None:
        return False
    return not state.status.is_over


def apply_move(state: GameState, index) -> GameState:
    """
    place the next mark and flip the turn
    returns the same state when the guard rejects the move
    """
    if not is_move_allowed(state, index):
        return state
    squares = list(state.squares)
    squares[index] = state.current_mark
    return GameState(squares=tuple(squares), x_is_next=not state.x_is_next)


def reset_state() -> GameState:
    return GameState.initial()

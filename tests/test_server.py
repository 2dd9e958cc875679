import pytest

from tictactoe_sync.game_logic import GameState, apply_move
from tictactoe_sync.server import to_payload


def test_initial_state(http):
    resp = http.get("/state")
    assert resp.status_code == 200
    assert resp.get_json() == {
        "board": [[None, None, None], [None, None, None], [None, None, None]],
        "nextPlayer": "X",
        "winner": None,
        "isDraw": False,
    }


def test_move_updates_board_and_turn(http):
    data = http.post("/move", json={"row": 1, "col": 2}).get_json()
    assert data["board"][1][2] == "X"
    assert data["nextPlayer"] == "O"
    assert http.get("/state").get_json() == data


def test_occupied_cell_is_rejected(http):
    http.post("/move", json={"row": 0, "col": 0})
    resp = http.post("/move", json={"row": 0, "col": 0})
    assert resp.status_code == 400
    assert "error" in resp.get_json()


@pytest.mark.parametrize("body", [
    None,
    {},
    {"row": 3, "col": 0},
    {"row": 0, "col": -1},
    {"row": "1", "col": 1},
    {"row": True, "col": 1},
])
def test_malformed_move_is_rejected(http, body):
    resp = http.post("/move", json=body)
    assert resp.status_code == 400


def test_win_is_reported_and_locks_board(http):
    for row, col in [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]:
        data = http.post("/move", json={"row": row, "col": col}).get_json()
    assert data["winner"] == "X"
    assert data["isDraw"] is False
    assert http.post("/move", json={"row": 2, "col": 2}).status_code == 400


def test_draw_is_reported(http):
    # X O X / X O O / O X X
    for index in [0, 1, 2, 4, 3, 5, 7, 6, 8]:
        data = http.post("/move", json={"row": index // 3, "col": index % 3}).get_json()
    assert data["isDraw"] is True
    assert data["winner"] is None


def test_reset_returns_empty_board(http):
    http.post("/move", json={"row": 2, "col": 2})
    first = http.post("/reset").get_json()
    second = http.post("/reset").get_json()
    assert first == second
    assert first["board"] == [[None] * 3] * 3
    assert first["nextPlayer"] == "X"


def test_cors_header_present(http):
    assert http.get("/state").headers["Access-Control-Allow-Origin"] == "*"


def test_payload_nests_row_major():
    state = apply_move(apply_move(GameState.initial(), 5), 6)
    payload = to_payload(state)
    assert payload["board"] == [[None, None, None], [None, None, "X"], ["O", None, None]]
    assert payload["nextPlayer"] == "X"

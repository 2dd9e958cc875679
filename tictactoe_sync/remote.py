import logging
from typing import NamedTuple, Optional, Tuple

import requests

from .config import DEFAULT_BACKEND_URL, DEFAULT_TIMEOUT
from .game_logic import BOARD_SIZE, index_to_cell

logger = logging.getLogger(__name__)

MARKS = ("X", "O")


class RequestFailed(Exception):
    """
    any remote failure: unreachable, bad status or malformed reply
    """


class BoardState(NamedTuple):
    """
    remote snapshot, flattened to 9 cells
    """
    squares: Tuple[Optional[str], ...]
    x_is_next: bool
    winner: Optional[str]
    is_draw: bool


def normalize_state(data) -> BoardState:
    """
    nested 3x3 payload -> BoardState
    raises ValueError on anything that doesn't look like the contract
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    board = data.get("board")
    if not isinstance(board, list) or len(board) != BOARD_SIZE:
        raise ValueError("board must be a 3x3 array")
    squares = []
    for row in board:
        if not isinstance(row, list) or len(row) != BOARD_SIZE:
            raise ValueError("board must be a 3x3 array")
        for cell in row:
            if cell is not None and cell not in MARKS:
                raise ValueError(f"bad cell value {cell!r}")
            squares.append(cell)
    winner = data.get("winner")
    if winner is not None and winner not in MARKS:
        raise ValueError(f"bad winner {winner!r}")
    next_player = data.get("nextPlayer")
    if next_player not in MARKS:
        raise ValueError(f"bad nextPlayer {next_player!r}")
    is_draw = data.get("isDraw")
    if not isinstance(is_draw, bool):
        raise ValueError(f"isDraw must be a boolean, got {is_draw!r}")
    return BoardState(
        squares=tuple(squares),
        x_is_next=next_player == "X",
        winner=winner,
        is_draw=is_draw,
    )


class RemoteClient:
    """
    thin wrapper over the /state, /move and /reset endpoints
    """
    def __init__(self, base_url=DEFAULT_BACKEND_URL, timeout=DEFAULT_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # session for connection reuse
        self.session = session or requests.Session()

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return normalize_state(response.json())
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise RequestFailed(f"request failed: {e}") from e
        except ValueError as e:
            # bad json or wrong shape
            logger.warning("%s %s returned a malformed reply: %s", method, url, e)
            raise RequestFailed(f"request failed: {e}") from e

    def fetch_state(self) -> BoardState:
        return self._request("GET", "/state")

    def submit_move(self, index) -> BoardState:
        """
        index -> row/col; the server decides whether the move is legal
        """
        row, col = index_to_cell(index)
        return self._request("POST", "/move", json={"row": row, "col": col})

    def reset_game(self) -> BoardState:
        return self._request("POST", "/reset")

    def close(self):
        self.session.close()

import logging
import threading

from flask import Flask, jsonify, request

from .config import load_settings, setup_logging
from .game_logic import BOARD_SIZE, GameState, apply_move, is_move_allowed, reset_state

logger = logging.getLogger(__name__)


def to_payload(state: GameState):
    """
    flat GameState -> {board (3x3), nextPlayer, winner, isDraw}
    """
    squares = list(state.squares)
    status = state.status
    return {
        "board": [squares[r*BOARD_SIZE:(r+1)*BOARD_SIZE] for r in range(BOARD_SIZE)],
        "nextPlayer": state.current_mark,
        "winner": status.winner,
        "isDraw": status.is_draw,
    }


class GameStore:
    """
    the one authoritative game, shared by all requests
    """
    def __init__(self):
        self._lock = threading.Lock()
        self.state = GameState.initial()

    def get(self):
        with self._lock:
            return self.state

    def move(self, index):
        # returns the new state, or None when the move is illegal
        with self._lock:
            if not is_move_allowed(self.state, index):
                return None
            self.state = apply_move(self.state, index)
            return self.state

    def reset(self):
        with self._lock:
            self.state = reset_state()
            return self.state


def _parse_cell(data):
    if not isinstance(data, dict):
        return None
    row, col = data.get("row"), data.get("col")
    for v in (row, col):
        if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v < BOARD_SIZE:
            return None
    return row, col


def create_app(store=None):
    app = Flask(__name__)
    app.config["GAME_STORE"] = store or GameStore()

    def current_store() -> GameStore:
        return app.config["GAME_STORE"]

    @app.after_request
    def allow_cors(response):
        # browser clients live on another origin
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        return response

    @app.route("/state", methods=["GET"])
    def state():
        return jsonify(to_payload(current_store().get()))

    @app.route("/move", methods=["POST"])
    def move():
        cell = _parse_cell(request.get_json(silent=True))
        if cell is None:
            return jsonify({"error": "body must be {row: 0..2, col: 0..2}"}), 400
        row, col = cell
        new_state = current_store().move(row*BOARD_SIZE + col)
        if new_state is None:
            return jsonify({"error": "illegal move"}), 400
        logger.info("move accepted at row=%s col=%s", row, col)
        return jsonify(to_payload(new_state))

    @app.route("/reset", methods=["POST"])
    def reset():
        logger.info("game reset")
        return jsonify(to_payload(current_store().reset()))

    return app


def main():
    settings = load_settings()
    setup_logging(settings)
    app = create_app()
    logger.info("serving on %s:%s", settings.server_host, settings.server_port)
    app.run(host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()

from urllib.parse import urlsplit

import pytest
import requests

from tictactoe_sync.remote import BoardState, RequestFailed
from tictactoe_sync.server import create_app


def board_state(squares=(None,) * 9, x_is_next=True, winner=None, is_draw=False):
    return BoardState(tuple(squares), x_is_next, winner, is_draw)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self.payload = payload
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.bad_json:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    """
    records requests and replies with queued responses or exceptions
    """
    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []
        self.closed = False

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, timeout, kwargs))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self):
        self.closed = True


class FlaskSession:
    """
    requests-like session routed into a Flask test client
    """
    def __init__(self, app):
        self.client = app.test_client()

    def request(self, method, url, timeout=None, json=None):
        resp = self.client.open(urlsplit(url).path, method=method, json=json)
        return FakeResponse(resp.status_code, resp.get_json())

    def close(self):
        pass


class FakeClient:
    """
    stands in for RemoteClient in controller tests
    """
    def __init__(self, state=None, fail=False):
        self.state = state or board_state()
        self.fail = fail
        self.calls = []

    def _reply(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail:
            raise RequestFailed("request failed: connection refused")
        return self.state

    def fetch_state(self):
        return self._reply("fetch_state")

    def submit_move(self, index):
        return self._reply("submit_move", index)

    def reset_game(self):
        return self._reply("reset_game")


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def http(app):
    return app.test_client()

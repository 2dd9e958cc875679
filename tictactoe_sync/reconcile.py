"""
Local/remote reconciliation for a single game session.

The ``Session`` value is owned by one controller (the GUI thread in the
desktop app). Every transition is a plain function returning a new
``Session``, so the two modes can be exercised without a window or a
backend:

* ``Local``  - the backend never answered, or failed since. Moves and
  resets are computed here and the network is never touched again for
  the rest of the session.
* ``Remote`` - the backend answered and has not failed since. Its replies
  replace the local game wholesale.
"""
import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from .game_logic import GameState, apply_move, is_move_allowed, reset_state
from .remote import RequestFailed

logger = logging.getLogger(__name__)


class Mode(Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Connectivity:
    offline: bool = False
    backend_ok: bool = False

    @property
    def mode(self) -> Mode:
        return Mode.REMOTE if self.backend_ok else Mode.LOCAL


@dataclass(frozen=True)
class Session:
    game: GameState = field(default_factory=GameState.initial)
    connectivity: Connectivity = field(default_factory=Connectivity)
    pending: bool = False

    @property
    def mode(self) -> Mode:
        return self.connectivity.mode

    @property
    def offline(self) -> bool:
        return self.connectivity.offline

    @property
    def accepts_input(self) -> bool:
        # board is disabled while a request is out or once the game ended
        return not self.pending and not self.game.status.is_over


def can_move(session: Session, index) -> bool:
    return not session.pending and is_move_allowed(session.game, index)


def begin_request(session: Session) -> Session:
    return replace(session, pending=True)


def adopt_remote(session: Session, remote) -> Session:
    """
    successful reply (mount, move or reset): stay/enter Remote, clear offline
    """
    return Session(
        game=GameState.from_remote(remote),
        connectivity=Connectivity(offline=False, backend_ok=True),
        pending=False,
    )


def _degrade(session: Session, game: GameState) -> Session:
    return Session(
        game=game,
        connectivity=Connectivity(offline=True, backend_ok=False),
        pending=False,
    )


def mount_failed(session: Session) -> Session:
    # keep the default board
    return _degrade(session, session.game)


def move_failed(session: Session, index) -> Session:
    return _degrade(session, apply_move(session.game, index))


def reset_failed(session: Session) -> Session:
    return _degrade(session, reset_state())


def local_move(session: Session, index) -> Session:
    return replace(session, game=apply_move(session.game, index), pending=False)


def local_reset(session: Session) -> Session:
    return replace(session, game=reset_state(), pending=False)


class SessionController:
    """
    single owner of the Session; talks to the backend only while Remote
    """
    def __init__(self, client=None, session=None):
        self.client = client
        self.session = session or Session()

    @property
    def is_remote(self):
        return self.client is not None and self.session.mode is Mode.REMOTE

    # -- step functions, used around an asynchronous request --

    def begin_request(self):
        self.session = begin_request(self.session)
        return self.session

    def adopt_remote(self, remote):
        was_remote = self.session.mode is Mode.REMOTE
        self.session = adopt_remote(self.session, remote)
        if not was_remote:
            logger.info("backend reachable, playing against remote state")
        return self.session

    def _log_degraded(self, what):
        # the client already warned with the details
        if self.session.mode is Mode.REMOTE:
            logger.info("%s failed, switching to local play", what)
        else:
            logger.info("%s failed, starting in local play", what)

    def mount_failed(self):
        self._log_degraded("initial fetch")
        self.session = mount_failed(self.session)
        return self.session

    def move_failed(self, index):
        self._log_degraded("remote move")
        self.session = move_failed(self.session, index)
        return self.session

    def reset_failed(self):
        self._log_degraded("remote reset")
        self.session = reset_failed(self.session)
        return self.session

    def local_move(self, index):
        self.session = local_move(self.session, index)
        return self.session

    def local_reset(self):
        self.session = local_reset(self.session)
        return self.session

    def can_move(self, index):
        return can_move(self.session, index)

    # -- synchronous composition --

    def mount(self):
        """
        probe the backend once; failure leaves the session Local for good
        """
        if self.client is None:
            self.session = mount_failed(self.session)
            return self.session
        self.begin_request()
        try:
            remote = self.client.fetch_state()
        except RequestFailed:
            return self.mount_failed()
        return self.adopt_remote(remote)

    def move(self, index):
        """
        guarded move; remote first when Remote, local otherwise
        """
        if not self.can_move(index):
            return self.session
        if not self.is_remote:
            return self.local_move(index)
        self.begin_request()
        try:
            remote = self.client.submit_move(index)
        except RequestFailed:
            return self.move_failed(index)
        return self.adopt_remote(remote)

    def reset(self):
        if self.session.pending:
            return self.session
        if not self.is_remote:
            return self.local_reset()
        self.begin_request()
        try:
            remote = self.client.reset_game()
        except RequestFailed:
            return self.reset_failed()
        return self.adopt_remote(remote)

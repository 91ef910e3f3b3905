import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `chessroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from chessroom import create_app, socketio
from chessroom.services.games import GameCoordinator, ManualScheduler, MoveResult
from chessroom.services.games.commands import Connect


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MOVE_ALLOWANCE_SEC = 30
    CLOCK_TICK_SEC = 1.0
    MAX_ACTIVE_GAMES = 0
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = ['http://localhost:5173']
    LOG_LEVEL = 'DEBUG'


class RecordingTransport:
    """Captures emissions and resolves room broadcasts to their recipients."""

    def __init__(self):
        self.sent = []
        self.deliveries = []
        self.rooms = defaultdict(set)

    def emit(self, emission):
        self.sent.append(emission)
        recipients = set(self.rooms[emission.to]) if emission.to in self.rooms else {emission.to}
        for sid in recipients:
            self.deliveries.append((sid, emission))

    def join(self, sid, room):
        self.rooms[room].add(sid)

    def leave(self, sid, room):
        self.rooms.get(room, set()).discard(sid)

    def close_room(self, room):
        self.rooms.pop(room, None)

    def received(self, sid, event=None):
        return [e for who, e in self.deliveries if who == sid and (event is None or e.event == event)]

    def events(self, sid):
        return [e.event for who, e in self.deliveries if who == sid]

    def clear(self):
        self.sent.clear()
        self.deliveries.clear()


class ScriptedOracle:
    """Oracle double: legality comes from a script instead of chess rules."""

    def __init__(self, results=None):
        self.side = 'w'
        self.results = list(results or [])
        self.plies = 0
        self.checkmate = False
        self.draw = False
        self.applied = []

    def turn(self):
        return self.side

    def fen(self):
        return f"scripted-{self.plies}"

    def apply(self, move):
        ok = self.results.pop(0) if self.results else True
        if not ok:
            return MoveResult(False, self.fen())
        self.applied.append(move)
        self.plies += 1
        self.side = 'b' if self.side == 'w' else 'w'
        return MoveResult(True, self.fen(), dict(move, color='b' if self.side == 'w' else 'w'))

    def is_checkmate(self):
        return self.checkmate

    def is_draw(self):
        return self.draw

    def is_terminal(self):
        return self.checkmate or self.draw


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def coordinator(transport, scheduler):
    return GameCoordinator(transport=transport, scheduler=scheduler, allowance=30, tick_interval=1.0)


@pytest.fixture()
def scripted_coordinator(transport, scheduler):
    return GameCoordinator(
        transport=transport, scheduler=scheduler, allowance=30, tick_interval=1.0,
        oracle_factory=ScriptedOracle,
    )


def pair(coord, white='A', black='B'):
    """Connect two sids and return the game they were paired into."""
    coord.handle(white, Connect())
    coord.handle(black, Connect())
    return coord.registry.find_by_player(white)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client(), namespace='/')
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass

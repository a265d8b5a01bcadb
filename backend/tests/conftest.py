import random
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Any

import pytest

from wordclash.game.registry import RoomRegistry
from wordclash.game.service import GameService


@dataclass
class Emitted:
    event: str
    payload: Any
    to: str | None
    skip_sid: str | None


class RecordingNotifier:
    def __init__(self):
        self.events: list[Emitted] = []
        self.channels: dict[str, set] = defaultdict(set)
        self._lock = Lock()

    def emit(self, event, payload, to=None, skip_sid=None):
        with self._lock:
            self.events.append(Emitted(event, payload, to, skip_sid))

    def enter(self, sid, channel):
        self.channels[channel].add(sid)

    def leave(self, sid, channel):
        self.channels[channel].discard(sid)

    def named(self, event):
        return [e for e in self.events if e.event == event]

    def clear(self):
        self.events.clear()


class ManualScheduler:
    """Collects background tasks; tests decide when they run. Sleeping is a no-op."""

    def __init__(self):
        self.pending = []
        self.slept = []

    def spawn(self, fn, *args):
        self.pending.append((fn, args))

    def sleep(self, seconds):
        self.slept.append(seconds)

    def run_pending(self):
        # Only tasks queued before this call; tasks they spawn wait for the next call.
        tasks, self.pending = self.pending, []
        for fn, args in tasks:
            fn(*args)
        return len(tasks)


def numbered_words(count):
    return [f"word{i}" for i in range(count)]


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def service(registry, notifier, scheduler):
    return GameService(
        registry,
        notifier,
        scheduler,
        round_duration=300,
        start_delay=3,
        word_source=numbered_words,
        rng=random.Random(1234),
    )


def join_players(service, room_id, *player_ids):
    for pid in player_ids:
        service.join_room(room_id, pid, f"nick-{pid}"[:10])


def start_playing(service, scheduler, room):
    """Run the start-delay task so a `starting` room enters `playing`."""
    assert room.status == "starting"
    scheduler.run_pending()
    assert room.status == "playing"
    return room


def owned_words(room, team):
    return [c.word for c in room.deck if c.team == team]


# -- Flask / Socket.IO fixtures ------------------------------------------------

from wordclash.config import Config  # noqa: E402
from wordclash.server import create_app  # noqa: E402


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = "WARNING"
    START_DELAY_SEC = 0
    EMPTY_ROOM_TTL_SEC = 60
    DEFAULT_MAX_TEAM_SIZE = 5
    DEFAULT_TOTAL_CARDS = 40


@pytest.fixture()
def app_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_socketio):
    return app_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_socketio):
    app, socketio = app_socketio
    clients = []

    def _make():
        c = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(c)
        return c

    yield _make

    for c in clients:
        if c.is_connected():
            c.disconnect()

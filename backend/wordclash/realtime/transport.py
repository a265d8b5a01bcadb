from __future__ import annotations

from typing import Any, Callable

from flask_socketio import SocketIO


class SocketIONotifier:
    """Delivers game notifications through Flask-SocketIO outside request context."""

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self._socketio = socketio
        self._namespace = namespace

    def emit(self, event: str, payload: Any, to: str | None = None, skip_sid: str | None = None) -> None:
        self._socketio.emit(event, payload, to=to, skip_sid=skip_sid, namespace=self._namespace)

    def enter(self, sid: str, channel: str) -> None:
        self._socketio.server.enter_room(sid, channel, namespace=self._namespace)

    def leave(self, sid: str, channel: str) -> None:
        self._socketio.server.leave_room(sid, channel, namespace=self._namespace)


class SocketIOScheduler:
    """Background tasks on whatever async mode the SocketIO server runs (eventlet or threads)."""

    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def spawn(self, fn: Callable[..., Any], *args: Any) -> Any:
        return self._socketio.start_background_task(fn, *args)

    def sleep(self, seconds: float) -> None:
        self._socketio.sleep(seconds)

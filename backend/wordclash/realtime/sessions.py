from __future__ import annotations

from dataclasses import dataclass
from threading import RLock


@dataclass
class Session:
    sid: str
    nickname: str
    room_id: str | None = None
    in_lobby: bool = False


def default_nickname(sid: str) -> str:
    return f"P_{sid[:8]}"


class SessionStore:
    """Per-connection records keyed by Socket.IO sid."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, sid: str) -> Session | None:
        with self._lock:
            return self._sessions.get(sid)

    def get_or_create(self, sid: str) -> Session:
        with self._lock:
            session = self._sessions.get(sid)
            if session is None:
                session = Session(sid=sid, nickname=default_nickname(sid))
                self._sessions[sid] = session
            return session

    def pop(self, sid: str) -> Session | None:
        with self._lock:
            return self._sessions.pop(sid, None)

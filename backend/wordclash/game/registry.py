from __future__ import annotations

import uuid
from threading import RLock
from typing import Callable

from .models import Room

RoomBuilder = Callable[[str], Room]


def new_room_id() -> str:
    return uuid.uuid4().hex[:8]


class RoomRegistry:
    """Process-wide map of room id to Room.

    Only guards the map itself; room state is guarded by each room's own lock.
    Callers holding a room lock may enter the registry, never the reverse.
    Rooms are built completely before they become visible to lookups.
    """

    def __init__(self, id_factory: Callable[[], str] = new_room_id) -> None:
        self._rooms: dict[str, Room] = {}
        self._lock = RLock()
        self._id_factory = id_factory

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._rooms

    def create(self, build: RoomBuilder) -> Room:
        with self._lock:
            room_id = self._id_factory()
            while room_id in self._rooms:
                room_id = self._id_factory()
            room = build(room_id)
            self._rooms[room_id] = room
            return room

    def get_or_create(self, room_id: str, build: RoomBuilder) -> tuple[Room, bool]:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is not None:
                return room, False
            room = build(room_id)
            self._rooms[room_id] = room
            return room, True

    def get(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def remove(self, room: Room) -> bool:
        # Only drop the entry if it still points at this room instance.
        with self._lock:
            if self._rooms.get(room.id) is room:
                del self._rooms[room.id]
                return True
            return False

    def list(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

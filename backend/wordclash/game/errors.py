"""Rejections raised by the game service.

Every rejection carries a short machine-readable ``code`` that the realtime
layer forwards to the requesting connection only. Raising one of these inside
a room mutation discards everything that mutation queued for broadcast.
"""

from __future__ import annotations


class GameError(Exception):
    code = "game_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class InvalidPayload(GameError):
    code = "invalid_payload"


class InvalidNickname(GameError):
    code = "invalid_nickname"


class RoomNotFound(GameError):
    code = "room_not_found"


class NotInRoom(GameError):
    code = "not_in_room"


class RoomFull(GameError):
    code = "room_full"


class GameAlreadyStarted(GameError):
    code = "game_already_started"


class NotRoomOwner(GameError):
    code = "only_owner"


class SettingsLocked(GameError):
    code = "settings_locked"


class TeamTooLarge(GameError):
    code = "team_too_large"


class TeamsNotReady(GameError):
    code = "teams_not_ready"


class TeamsLocked(GameError):
    code = "teams_locked"


class TeamFull(GameError):
    code = "team_full"

from __future__ import annotations

import logging
from typing import Any

from flask import current_app, request
from flask_socketio import SocketIO, emit, join_room

from ..game.errors import GameError, InvalidPayload
from ..game.service import GameService
from ..game.settings import normalize_nickname
from ..utils.ip import get_client_ip
from . import events as ev
from .sessions import SessionStore

logger = logging.getLogger(__name__)


def _field(data: Any, key: str) -> Any:
    # Clients send either a bare value or an object payload.
    if isinstance(data, dict):
        return data.get(key)
    return data


def register_socketio_handlers(socketio: SocketIO, service: GameService, sessions: SessionStore) -> None:
    def _reject(exc: GameError, event: str = ev.ROOM_ERROR) -> dict:
        emit(event, {"error": exc.code}, to=request.sid)
        return {"ok": False, "error": exc.code}

    def _enter_lobby(session) -> None:
        join_room(ev.LOBBY_CHANNEL)
        session.in_lobby = True
        emit(ev.AVAILABLE_ROOMS, service.list_available_rooms(), to=request.sid)

    @socketio.on("connect")
    def on_connect(auth=None):
        sessions.get_or_create(request.sid)
        trust = bool(current_app.config.get("TRUST_PROXY_HEADERS", False))
        logger.info("[connect] sid=%s ip=%s", request.sid, get_client_ip(request, trust))

    @socketio.on(ev.JOIN_LOBBY)
    def on_join_lobby(data=None):
        session = sessions.get_or_create(request.sid)
        try:
            session.nickname = normalize_nickname(_field(data, "nickname"))
        except GameError as exc:
            return _reject(exc)

        emit(ev.LOBBY_JOINED, {"id": request.sid, "nickname": session.nickname}, to=request.sid)
        if session.room_id is None:
            _enter_lobby(session)
        return {"ok": True, "nickname": session.nickname}

    @socketio.on(ev.LIST_ROOMS)
    def on_list_rooms(data=None):
        rooms = service.list_available_rooms()
        emit(ev.AVAILABLE_ROOMS, rooms, to=request.sid)
        return {"ok": True, "rooms": rooms}

    @socketio.on(ev.CREATE_ROOM)
    def on_create_room(data=None):
        if data is not None and not isinstance(data, dict):
            return _reject(InvalidPayload())
        room = service.create_room(owner_id=request.sid, raw_settings=data)
        return {"ok": True, "roomId": room.id}

    @socketio.on(ev.JOIN_ROOM)
    def on_join_room(data=None):
        session = sessions.get_or_create(request.sid)
        room_id = str(_field(data, "roomId") or "").strip()
        if not room_id:
            return _reject(InvalidPayload(), ev.JOIN_ERROR)

        if isinstance(data, dict) and data.get("nickname"):
            try:
                session.nickname = normalize_nickname(data["nickname"])
            except GameError as exc:
                return _reject(exc, ev.JOIN_ERROR)

        if session.room_id and session.room_id != room_id:
            service.leave_room(session.room_id, request.sid)
            session.room_id = None

        try:
            room = service.join_room(room_id, request.sid, session.nickname)
        except GameError as exc:
            return _reject(exc, ev.JOIN_ERROR)

        session.room_id = room.id
        session.in_lobby = False
        return {"ok": True, "roomId": room.id}

    @socketio.on(ev.LEAVE_ROOM)
    def on_leave_room(data=None):
        session = sessions.get_or_create(request.sid)
        if not session.room_id:
            return {"ok": False, "error": "not_in_room"}

        room_id = session.room_id
        session.room_id = None
        service.leave_room(room_id, request.sid)
        _enter_lobby(session)
        return {"ok": True}

    @socketio.on(ev.START_GAME)
    def on_start_game(data=None):
        session = sessions.get_or_create(request.sid)
        try:
            service.start_game(session.room_id, request.sid)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True}

    @socketio.on(ev.UPDATE_ROOM_SETTINGS)
    def on_update_room_settings(data=None):
        session = sessions.get_or_create(request.sid)
        try:
            settings = service.update_settings(session.room_id, request.sid, data)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True, "settings": settings.to_dict()}

    @socketio.on(ev.CHANGE_TEAM)
    def on_change_team(data=None):
        session = sessions.get_or_create(request.sid)
        try:
            team = service.change_team(session.room_id, request.sid)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True, "team": team}

    def _submit(data=None):
        session = sessions.get(request.sid)
        if session is None or not session.room_id:
            return {"ok": False, "status": "not_playing"}
        result = service.submit_word(session.room_id, request.sid, _field(data, "word"))
        return {"ok": result.claimed, "status": result.status}

    socketio.on_event(ev.TYPE_WORD, _submit)
    socketio.on_event(ev.SUBMIT_WORD, _submit)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        session = sessions.pop(request.sid)
        room_id = session.room_id if session else None
        service.disconnect(request.sid, room_id)
        logger.info("[disconnect] sid=%s room=%s", request.sid, room_id)

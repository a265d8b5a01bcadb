from __future__ import annotations

from flask import Blueprint, jsonify, request

from .deps import get_service

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_rooms():
    return jsonify({"rooms": get_service().list_available_rooms()})


@bp.post("/rooms")
def create_room():
    # Created without an owner; the first player to join becomes the owner.
    data = request.get_json(silent=True)
    if data is not None and not isinstance(data, dict):
        return jsonify({"error": "invalid_payload"}), 400

    service = get_service()
    room = service.create_room(owner_id=None, raw_settings=data)
    return jsonify({"roomId": room.id, "settings": room.settings.to_dict()}), 201


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    service = get_service()
    room = service.get_room(room_id)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(service.room_public_state(room))

from __future__ import annotations

from flask import Blueprint, jsonify

from .deps import get_service

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    service = get_service()
    return jsonify({"ok": True, "rooms": len(service.registry)})

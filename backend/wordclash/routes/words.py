from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from .deps import get_service

bp = Blueprint("words", __name__)


@bp.get("/words")
def get_words():
    try:
        count = int(request.args.get("count", "10"))
    except ValueError:
        count = 10

    limit = int(current_app.config.get("MAX_TOTAL_CARDS", 100))
    count = min(max(1, count), limit)
    return jsonify({"words": get_service().word_source(count)})

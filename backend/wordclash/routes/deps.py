from __future__ import annotations

from flask import current_app

from ..game.service import GameService

EXTENSION_KEY = "wordclash"


def get_service() -> GameService:
    return current_app.extensions[EXTENSION_KEY]

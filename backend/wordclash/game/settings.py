from __future__ import annotations

import math
from dataclasses import replace
from typing import Any

from .errors import InvalidNickname
from .models import Settings

MIN_TEAM_SIZE = 1
MAX_TEAM_SIZE = 7
MIN_TOTAL_CARDS = 4
NICKNAME_MIN = 2
NICKNAME_MAX = 10


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def clamp_team_size(value: int) -> int:
    return min(max(MIN_TEAM_SIZE, value), MAX_TEAM_SIZE)


def round_total_cards(value: float, max_total: int = 100) -> int:
    # Half-up rounding to the nearest even count.
    even = int(value / 2 + 0.5) * 2 if value >= 0 else 0
    upper = max(MIN_TOTAL_CARDS, max_total - max_total % 2)
    return min(max(MIN_TOTAL_CARDS, even), upper)


def normalize_settings(raw: dict | None, base: Settings, max_total_cards: int = 100) -> Settings:
    """Merge a partial client payload onto ``base``.

    Accepts camelCase keys from clients and snake_case keys from Python callers.
    Missing or non-numeric values keep the base setting.
    """
    payload = raw if isinstance(raw, dict) else {}
    changes: dict[str, int] = {}

    size = _as_int(payload.get("maxTeamSize", payload.get("max_team_size")))
    if size is not None:
        changes["max_team_size"] = clamp_team_size(size)

    cards_raw = payload.get("totalCards", payload.get("total_cards"))
    if cards_raw is not None and not isinstance(cards_raw, bool):
        try:
            cards = float(cards_raw)
        except (TypeError, ValueError):
            cards = None
        if cards is not None and math.isfinite(cards):
            changes["total_cards"] = round_total_cards(cards, max_total_cards)

    return replace(base, **changes)


def normalize_nickname(raw: Any) -> str:
    name = str(raw or "").strip()
    if len(name) < NICKNAME_MIN:
        raise InvalidNickname()
    name = name[:NICKNAME_MAX]
    # No control characters or markup.
    if "<" in name or ">" in name or any(ord(ch) < 32 for ch in name):
        raise InvalidNickname()
    return name

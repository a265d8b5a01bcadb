from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import Card, Room

ClaimStatus = Literal["claimed", "no_match", "already_claimed", "not_member", "not_playing"]


@dataclass(frozen=True)
class ClaimResult:
    status: ClaimStatus
    card: Card | None = None

    @property
    def claimed(self) -> bool:
        return self.status == "claimed"


def find_card(room: Room, word: str) -> Card | None:
    index = room.word_index.get(word)
    if index is None:
        return None
    return room.deck[index]


def claim_card(room: Room, player_id: str, word: str) -> ClaimResult:
    """Claim the card whose word equals ``word`` exactly.

    Misses are ordinary results, not errors: typos and lost races against a
    faster player are expected. Caller must hold ``room.lock``.
    """
    if room.status != "playing":
        return ClaimResult("not_playing")

    player = room.players.get(player_id)
    if player is None or player.team is None:
        return ClaimResult("not_member")

    card = find_card(room, word)
    if card is None:
        return ClaimResult("no_match")
    if card.claimed:
        return ClaimResult("already_claimed", card)

    card.claimed_by = player.id
    card.claimed_nickname = player.nickname
    card.claimed_team = player.team
    return ClaimResult("claimed", card)

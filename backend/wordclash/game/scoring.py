"""Score keeping and end-of-round decisions.

A team wins outright by claiming every card the *other* team owns. When the
clock runs out first the higher claim count wins, equal counts are a draw.
While a round is live, a team whose roster empties forfeits to the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import TEAMS, Card, Room, other_team

EndReason = Literal["sweep", "timeout", "depopulation"]


@dataclass(frozen=True)
class Outcome:
    winner: str
    reason: EndReason


def compute_scores(deck: list[Card]) -> dict[str, int]:
    scores = {"red": 0, "blue": 0}
    for card in deck:
        if card.claimed_team is not None:
            scores[card.claimed_team] += 1
    return scores


def opponent_cards_claimed(deck: list[Card], team: str) -> int:
    return sum(1 for c in deck if c.team == other_team(team) and c.claimed_team == team)


def evaluate_round(room: Room) -> Outcome | None:
    """Refresh ``room.scores`` and return the outcome if the round is over."""
    if room.status != "playing":
        return None

    room.scores = compute_scores(room.deck)
    cards_per_team = room.active_settings.cards_per_team

    for team in TEAMS:
        if opponent_cards_claimed(room.deck, team) >= cards_per_team:
            return Outcome(team, "sweep")

    if room.remaining_time <= 0:
        red, blue = room.scores["red"], room.scores["blue"]
        if red > blue:
            return Outcome("red", "timeout")
        if blue > red:
            return Outcome("blue", "timeout")
        return Outcome("draw", "timeout")

    return None


def check_depopulation(room: Room) -> Outcome | None:
    if room.status != "playing":
        return None
    for team in TEAMS:
        if not room.roster(team) and room.roster(other_team(team)):
            return Outcome(other_team(team), "depopulation")
    return None

from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .timer import RoundTimer


Team = Literal["red", "blue"]
RoomStatus = Literal["waiting", "starting", "playing", "finished"]

TEAMS: tuple[Team, Team] = ("red", "blue")


def other_team(team: Team) -> Team:
    return "blue" if team == "red" else "red"


@dataclass
class Player:
    id: str
    nickname: str
    team: Team | None = None

    def to_dict(self) -> dict:
        return {"id": self.id, "nickname": self.nickname, "team": self.team}


@dataclass
class Card:
    index: int
    word: str
    team: Team
    claimed_by: str | None = None
    claimed_nickname: str | None = None
    claimed_team: Team | None = None

    @property
    def claimed(self) -> bool:
        return self.claimed_team is not None

    def to_dict(self) -> dict:
        claimed_by = None
        if self.claimed_by is not None:
            claimed_by = {"id": self.claimed_by, "nickname": self.claimed_nickname}
        return {
            "index": self.index,
            "word": self.word,
            "team": self.team,
            "claimedBy": claimed_by,
            "claimedTeam": self.claimed_team,
        }


@dataclass(frozen=True)
class Settings:
    max_team_size: int = 5
    total_cards: int = 40

    @property
    def cards_per_team(self) -> int:
        return self.total_cards // 2

    @property
    def required_players(self) -> int:
        return self.max_team_size * 2

    def to_dict(self) -> dict:
        return {
            "maxTeamSize": self.max_team_size,
            "totalCards": self.total_cards,
            "cardsPerTeam": self.cards_per_team,
            "requiredPlayers": self.required_players,
        }


@dataclass
class Room:
    id: str
    settings: Settings
    owner_id: str | None = None
    status: RoomStatus = "waiting"
    players: dict[str, Player] = field(default_factory=dict)
    red: list[str] = field(default_factory=list)
    blue: list[str] = field(default_factory=list)
    deck: list[Card] = field(default_factory=list)
    word_index: dict[str, int] = field(default_factory=dict)
    round_settings: Settings | None = None
    remaining_time: int = 300
    created_at: float = 0.0
    started_at: float | None = None
    ended_at: float | None = None
    scores: dict[str, int] = field(default_factory=lambda: {"red": 0, "blue": 0})
    winner: str | None = None
    end_reason: str | None = None
    timer: RoundTimer | None = field(default=None, repr=False)
    closed: bool = False
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def roster(self, team: Team) -> list[str]:
        return self.red if team == "red" else self.blue

    def roster_players(self, team: Team) -> list[Player]:
        return [self.players[pid] for pid in self.roster(team) if pid in self.players]

    def set_deck(self, deck: list[Card]) -> None:
        self.deck = deck
        self.word_index = {card.word: card.index for card in deck}

    @property
    def active_settings(self) -> Settings:
        return self.round_settings or self.settings

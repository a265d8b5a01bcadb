from __future__ import annotations

import logging
import random
import time
from contextlib import contextmanager
from functools import partial
from typing import Any, Iterator, Protocol

from ..realtime import events as ev
from .deck import WordSource, build_deck
from .errors import (
    GameAlreadyStarted,
    InvalidPayload,
    NotInRoom,
    NotRoomOwner,
    RoomFull,
    RoomNotFound,
    SettingsLocked,
    TeamsLocked,
    TeamsNotReady,
    TeamTooLarge,
)
from .matching import ClaimResult, claim_card
from .models import Player, Room, Settings, Team
from .registry import RoomRegistry
from .scoring import Outcome, check_depopulation, compute_scores, evaluate_round
from .settings import normalize_nickname, normalize_settings
from .teams import assign_team, pick_team, remove_member, rosters_payload, switch_team
from .timer import RoundTimer, Scheduler
from .words import generate_words

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def emit(self, event: str, payload: Any, to: str | None = None, skip_sid: str | None = None) -> None: ...

    def enter(self, sid: str, channel: str) -> None: ...

    def leave(self, sid: str, channel: str) -> None: ...


class Outbox:
    """Notifications produced by one room mutation, delivered in order after it commits."""

    def __init__(self) -> None:
        self._items: list[tuple[str, tuple]] = []

    def __len__(self) -> int:
        return len(self._items)

    def emit(self, event: str, payload: Any, to: str, skip_sid: str | None = None) -> None:
        self._items.append(("emit", (event, payload, to, skip_sid)))

    def enter(self, sid: str, channel: str) -> None:
        self._items.append(("enter", (sid, channel)))

    def leave(self, sid: str, channel: str) -> None:
        self._items.append(("leave", (sid, channel)))

    def flush(self, notifier: Notifier) -> None:
        items, self._items = self._items, []
        for kind, args in items:
            try:
                if kind == "emit":
                    event, payload, to, skip_sid = args
                    notifier.emit(event, payload, to=to, skip_sid=skip_sid)
                elif kind == "enter":
                    notifier.enter(*args)
                else:
                    notifier.leave(*args)
            except Exception:
                logger.exception("[outbox] failed to deliver %s %s", kind, args[0])


class GameService:
    def __init__(
        self,
        registry: RoomRegistry,
        notifier: Notifier,
        scheduler: Scheduler,
        *,
        round_duration: int = 300,
        start_delay: float = 3,
        tick_interval: float = 1.0,
        empty_room_ttl: float = 10,
        default_settings: Settings | None = None,
        max_total_cards: int = 100,
        word_source: WordSource = generate_words,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.notifier = notifier
        self.scheduler = scheduler
        self.round_duration = round_duration
        self.start_delay = start_delay
        self.tick_interval = tick_interval
        self.empty_room_ttl = empty_room_ttl
        self.default_settings = default_settings or Settings()
        self.max_total_cards = max_total_cards
        self.word_source = word_source
        self.rng = rng

    # -- serialization point -------------------------------------------------

    @contextmanager
    def _mutate(self, room: Room) -> Iterator[Outbox]:
        # A rejection raised inside the block skips the flush, so nothing
        # queued by a half-checked operation ever reaches a client.
        with room.lock:
            outbox = Outbox()
            yield outbox
            outbox.flush(self.notifier)

    # -- room construction ---------------------------------------------------

    def _build_deck(self, total_cards: int):
        return build_deck(total_cards, word_source=self.word_source, rng=self.rng)

    def _new_room(self, room_id: str, settings: Settings | None = None, owner_id: str | None = None) -> Room:
        settings = settings or self.default_settings
        room = Room(
            id=room_id,
            settings=settings,
            owner_id=owner_id,
            remaining_time=self.round_duration,
            created_at=time.time(),
        )
        room.set_deck(self._build_deck(settings.total_cards))
        return room

    def create_room(self, owner_id: str | None = None, raw_settings: dict | None = None) -> Room:
        settings = normalize_settings(raw_settings, self.default_settings, self.max_total_cards)
        room = self.registry.create(partial(self._new_room, settings=settings, owner_id=owner_id or None))
        with self._mutate(room) as outbox:
            if owner_id:
                outbox.emit(ev.ROOM_CREATED, {"roomId": room.id, "settings": settings.to_dict()}, to=owner_id)
            self._announce_rooms(outbox)
        logger.info("[room-create] room=%s by=%s settings=%s", room.id, owner_id, settings)
        self.scheduler.spawn(self._reap_if_empty, room)
        return room

    def get_room(self, room_id: str) -> Room | None:
        return self.registry.get(room_id)

    def _require_room(self, room_id: str) -> Room:
        room = self.registry.get(str(room_id or "").strip())
        if room is None:
            raise RoomNotFound()
        return room

    @staticmethod
    def _require_member(room: Room, player_id: str) -> Player:
        if room.closed:
            raise RoomNotFound()
        player = room.players.get(player_id)
        if player is None:
            raise NotInRoom()
        return player

    # -- membership ----------------------------------------------------------

    def join_room(self, room_id: str, player_id: str, nickname: str) -> Room:
        room_id = str(room_id or "").strip()
        if not room_id:
            raise InvalidPayload()
        nickname = normalize_nickname(nickname)

        while True:
            room, created = self.registry.get_or_create(room_id, self._new_room)
            if created:
                logger.info("[room-create] room=%s by=%s (join)", room_id, player_id)
            with self._mutate(room) as outbox:
                if room.closed:
                    # Torn down between lookup and lock; the next lookup creates a fresh room.
                    continue

                if player_id in room.players:
                    outbox.emit(ev.ROOM_JOINED, self._snapshot(room, player_id), to=player_id)
                    return room

                if room.status != "waiting":
                    raise GameAlreadyStarted()
                if len(room.players) >= room.settings.required_players or pick_team(room) is None:
                    raise RoomFull()

                player = Player(id=player_id, nickname=nickname)
                assign_team(room, player)
                # A creator keeps ownership even when someone else joins first.
                if room.owner_id is None:
                    room.owner_id = player_id

                outbox.leave(player_id, ev.LOBBY_CHANNEL)
                outbox.enter(player_id, room.id)
                outbox.emit(ev.PLAYER_JOINED, player.to_dict(), to=room.id, skip_sid=player_id)
                outbox.emit(ev.ROOM_JOINED, self._snapshot(room, player_id), to=player_id)
                logger.info(
                    "[join] room=%s sid=%s team=%s players=%d/%d",
                    room.id, player_id, player.team, len(room.players), room.settings.required_players,
                )

                self._maybe_auto_start(room, outbox)
                self._announce_rooms(outbox)
                return room

    def leave_room(self, room_id: str, player_id: str) -> bool:
        room = self.registry.get(room_id)
        if room is None:
            return False

        with self._mutate(room) as outbox:
            if room.closed or player_id not in room.players:
                return False

            player = remove_member(room, player_id)
            if room.owner_id == player_id:
                room.owner_id = next(iter(room.players), None)

            outbox.leave(player_id, room.id)
            outbox.emit(
                ev.PLAYER_LEFT,
                {"id": player.id, "nickname": player.nickname, "team": player.team, "ownerId": room.owner_id},
                to=room.id,
            )
            logger.info("[leave] room=%s sid=%s status=%s remaining=%d", room.id, player_id, room.status, len(room.players))

            if not room.players:
                self._teardown(room)
            else:
                outcome = check_depopulation(room)
                if outcome is not None:
                    self._finish(room, outcome, outbox)

            self._announce_rooms(outbox)
            return True

    def disconnect(self, player_id: str, room_id: str | None = None) -> bool:
        self._release_ownership(player_id)
        if room_id:
            return self.leave_room(room_id, player_id)
        # No session record: fall back to a scan.
        left = False
        for room in self.registry.list():
            if player_id in room.players:
                left = self.leave_room(room.id, player_id) or left
        return left

    def _release_ownership(self, player_id: str) -> None:
        # Rooms created by this connection that it never joined.
        for room in self.registry.list():
            if room.owner_id != player_id or player_id in room.players:
                continue
            with self._mutate(room):
                if room.closed or room.owner_id != player_id or player_id in room.players:
                    continue
                room.owner_id = next(iter(room.players), None)
                logger.info("[owner] room=%s released by=%s owner=%s", room.id, player_id, room.owner_id)

    def change_team(self, room_id: str, player_id: str) -> Team:
        room = self._require_room(room_id)
        with self._mutate(room) as outbox:
            self._require_member(room, player_id)
            if room.status != "waiting":
                raise TeamsLocked()
            team = switch_team(room, player_id)
            outbox.emit(ev.TEAMS_UPDATED, rosters_payload(room), to=room.id)
            logger.info("[team-switch] room=%s sid=%s team=%s", room.id, player_id, team)
            return team

    # -- settings / start ------------------------------------------------------

    def update_settings(self, room_id: str, player_id: str, raw: dict | None) -> Settings:
        if raw is not None and not isinstance(raw, dict):
            raise InvalidPayload()
        room = self._require_room(room_id)
        with self._mutate(room) as outbox:
            self._require_member(room, player_id)
            if room.owner_id != player_id:
                raise NotRoomOwner()
            if room.status != "waiting":
                raise SettingsLocked()

            new = normalize_settings(raw, room.settings, self.max_total_cards)
            if new == room.settings:
                return new
            if len(room.red) > new.max_team_size or len(room.blue) > new.max_team_size:
                raise TeamTooLarge()

            deck = None
            if new.total_cards != room.settings.total_cards:
                deck = self._build_deck(new.total_cards)

            room.settings = new
            if deck is not None:
                room.set_deck(deck)

            outbox.emit(ev.ROOM_SETTINGS_UPDATED, new.to_dict(), to=room.id)
            logger.info("[settings] room=%s settings=%s", room.id, new)
            self._maybe_auto_start(room, outbox)
            self._announce_rooms(outbox)
            return new

    def start_game(self, room_id: str, player_id: str) -> None:
        room = self._require_room(room_id)
        with self._mutate(room) as outbox:
            self._require_member(room, player_id)
            if room.owner_id != player_id:
                raise NotRoomOwner()
            if room.status != "waiting":
                raise GameAlreadyStarted()
            if not room.red or not room.blue:
                raise TeamsNotReady()
            self._begin_starting(room, outbox)
            self._announce_rooms(outbox)

    def _maybe_auto_start(self, room: Room, outbox: Outbox) -> None:
        if room.status == "waiting" and len(room.players) == room.settings.required_players:
            self._begin_starting(room, outbox)

    def _begin_starting(self, room: Room, outbox: Outbox) -> bool:
        # The waiting -> starting edge is the only place the start delay gets scheduled.
        if room.status != "waiting":
            return False
        room.status = "starting"
        outbox.emit(ev.GAME_STARTING, {"countdown": self.start_delay}, to=room.id)
        logger.info("[start] room=%s players=%d delay=%ss", room.id, len(room.players), self.start_delay)
        self.scheduler.spawn(self._finish_starting, room)
        return True

    def _finish_starting(self, room: Room) -> None:
        try:
            self.scheduler.sleep(self.start_delay)
            with self._mutate(room) as outbox:
                if room.closed or room.status != "starting":
                    return
                self._enter_playing(room, outbox)
        except Exception:
            logger.exception("[start-error] room=%s", room.id)

    def _enter_playing(self, room: Room, outbox: Outbox) -> None:
        room.round_settings = room.settings
        room.status = "playing"
        room.started_at = time.time()
        room.remaining_time = self.round_duration
        room.scores = compute_scores(room.deck)

        if room.timer is None or not room.timer.active:
            room.timer = RoundTimer(
                self.scheduler,
                partial(self._on_tick, room),
                interval=self.tick_interval,
                name=room.id,
            )

        outbox.emit(
            ev.GAME_STARTED,
            {
                "cards": [c.to_dict() for c in room.deck],
                **rosters_payload(room),
                "timer": room.remaining_time,
                "settings": room.round_settings.to_dict(),
            },
            to=room.id,
        )
        logger.info("[playing] room=%s red=%d blue=%d", room.id, len(room.red), len(room.blue))

        # Everyone on one side may have left during the countdown.
        outcome = check_depopulation(room)
        if outcome is not None:
            self._finish(room, outcome, outbox)
            return
        room.timer.start()

    # -- play ------------------------------------------------------------------

    def submit_word(self, room_id: str, player_id: str, word: Any) -> ClaimResult:
        room = self.registry.get(room_id) if room_id else None
        if room is None:
            return ClaimResult("not_playing")
        if not isinstance(word, str):
            return ClaimResult("no_match")

        with self._mutate(room) as outbox:
            if room.closed:
                return ClaimResult("not_playing")
            result = claim_card(room, player_id, word)
            if not result.claimed:
                return result

            card = result.card
            outcome = evaluate_round(room)
            outbox.emit(
                ev.CARD_CLAIMED,
                {
                    "cardIndex": card.index,
                    "claimedBy": {"id": card.claimed_by, "nickname": card.claimed_nickname},
                    "claimedTeam": card.claimed_team,
                    "scores": dict(room.scores),
                },
                to=room.id,
            )
            if outcome is not None:
                self._finish(room, outcome, outbox)
            return result

    def _on_tick(self, room: Room, timer: RoundTimer) -> bool:
        with self._mutate(room) as outbox:
            if room.closed or room.timer is not timer or room.status != "playing":
                return False
            room.remaining_time = max(0, room.remaining_time - 1)
            outbox.emit(ev.TIMER_UPDATE, room.remaining_time, to=room.id)
            outcome = evaluate_round(room)
            if outcome is not None:
                self._finish(room, outcome, outbox)
            return room.status == "playing" and room.remaining_time > 0

    def _finish(self, room: Room, outcome: Outcome, outbox: Outbox) -> bool:
        if room.status == "finished":
            return False
        room.scores = compute_scores(room.deck)
        room.status = "finished"
        room.winner = outcome.winner
        room.end_reason = outcome.reason
        room.ended_at = time.time()
        if room.timer is not None:
            room.timer.cancel()
        outbox.emit(
            ev.GAME_END,
            {"winner": outcome.winner, "scores": dict(room.scores), "reason": outcome.reason},
            to=room.id,
        )
        logger.info(
            "[game-end] room=%s winner=%s reason=%s scores=%s remaining=%ss",
            room.id, outcome.winner, outcome.reason, room.scores, room.remaining_time,
        )
        return True

    # -- teardown ----------------------------------------------------------------

    def _teardown(self, room: Room) -> None:
        # Caller holds room.lock: closing, stopping the timer and unregistering is one step.
        room.closed = True
        if room.timer is not None:
            room.timer.cancel()
        self.registry.remove(room)
        logger.info("[teardown] room=%s status=%s", room.id, room.status)

    def _reap_if_empty(self, room: Room) -> None:
        try:
            self.scheduler.sleep(self.empty_room_ttl)
            with self._mutate(room) as outbox:
                if room.closed or room.players:
                    return
                self._teardown(room)
                self._announce_rooms(outbox)
        except Exception:
            logger.exception("[reap-error] room=%s", room.id)

    # -- views -----------------------------------------------------------------

    def list_available_rooms(self) -> list[dict]:
        # Lock-free read: callers may already hold another room's lock.
        rooms = [r for r in self.registry.list() if r.status == "waiting" and not r.closed]
        rooms.sort(key=lambda r: r.created_at)
        return [
            {
                "id": r.id,
                "currentPlayers": len(r.players),
                "maxPlayers": r.settings.required_players,
                "settings": r.settings.to_dict(),
            }
            for r in rooms
        ]

    def _announce_rooms(self, outbox: Outbox) -> None:
        outbox.emit(ev.ROOM_LIST_UPDATED, self.list_available_rooms(), to=ev.LOBBY_CHANNEL)

    def _snapshot(self, room: Room, viewer_id: str | None = None) -> dict:
        payload = {
            "roomId": room.id,
            "status": room.status,
            "ownerId": room.owner_id,
            "settings": room.settings.to_dict(),
            "players": [p.to_dict() for p in room.players.values()],
            **rosters_payload(room),
            "remainingTime": room.remaining_time,
            "scores": dict(room.scores),
            "winner": room.winner,
            "endReason": room.end_reason,
            "createdAt": room.created_at,
            "startedAt": room.started_at,
        }
        if room.status in ("playing", "finished"):
            payload["cards"] = [c.to_dict() for c in room.deck]
        if viewer_id and viewer_id in room.players:
            payload["player"] = room.players[viewer_id].to_dict()
        return payload

    def room_public_state(self, room: Room, viewer_id: str | None = None) -> dict:
        with room.lock:
            return self._snapshot(room, viewer_id)

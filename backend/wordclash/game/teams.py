from __future__ import annotations

from .errors import NotInRoom, TeamFull
from .models import Player, Room, Team, other_team


def pick_team(room: Room) -> Team | None:
    """Team with fewer members, red on a tie, never a full one."""
    cap = room.settings.max_team_size
    red, blue = len(room.red), len(room.blue)

    preferred: Team = "red" if red <= blue else "blue"
    if len(room.roster(preferred)) < cap:
        return preferred
    fallback = other_team(preferred)
    if len(room.roster(fallback)) < cap:
        return fallback
    return None


def assign_team(room: Room, player: Player) -> Team | None:
    team = pick_team(room)
    if team is None:
        return None
    player.team = team
    room.roster(team).append(player.id)
    room.players[player.id] = player
    return team


def switch_team(room: Room, player_id: str) -> Team:
    player = room.players.get(player_id)
    if player is None or player.team is None:
        raise NotInRoom()

    target = other_team(player.team)
    if len(room.roster(target)) >= room.settings.max_team_size:
        raise TeamFull()

    room.roster(player.team).remove(player_id)
    room.roster(target).append(player_id)
    player.team = target
    return target


def remove_member(room: Room, player_id: str) -> Player | None:
    player = room.players.pop(player_id, None)
    for roster in (room.red, room.blue):
        if player_id in roster:
            roster.remove(player_id)
    return player


def rosters_payload(room: Room) -> dict:
    return {
        "redTeam": [p.to_dict() for p in room.roster_players("red")],
        "blueTeam": [p.to_dict() for p in room.roster_players("blue")],
    }

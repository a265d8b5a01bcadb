import random

import pytest

from wordclash.game.errors import NotInRoom, TeamFull
from wordclash.game.models import Player, Room, Settings
from wordclash.game.teams import assign_team, pick_team, remove_member, rosters_payload, switch_team


def make_room(size=2):
    return Room(id="r1", settings=Settings(max_team_size=size, total_cards=8))


def add(room, pid):
    return assign_team(room, Player(id=pid, nickname=f"n-{pid}"))


def assert_invariants(room):
    cap = room.settings.max_team_size
    assert len(room.red) <= cap
    assert len(room.blue) <= cap
    assert not set(room.red) & set(room.blue)
    assert set(room.red) | set(room.blue) == set(room.players)
    for pid, player in room.players.items():
        assert pid in room.roster(player.team)


def test_assignment_alternates_starting_with_red():
    room = make_room(size=2)
    assert [add(room, p) for p in ("a", "b", "c", "d")] == ["red", "blue", "red", "blue"]
    assert pick_team(room) is None
    assert add(room, "e") is None
    assert "e" not in room.players
    assert_invariants(room)


def test_assignment_fills_the_open_team():
    room = make_room(size=2)
    add(room, "a")
    add(room, "b")
    switch_team(room, "b")  # red: a, b
    assert add(room, "c") == "blue"


def test_switch_moves_player():
    room = make_room(size=2)
    add(room, "a")
    assert switch_team(room, "a") == "blue"
    assert room.red == [] and room.blue == ["a"]
    assert room.players["a"].team == "blue"


def test_switch_into_full_team_changes_nothing():
    room = make_room(size=1)
    add(room, "a")
    add(room, "b")
    with pytest.raises(TeamFull):
        switch_team(room, "a")
    assert room.red == ["a"] and room.blue == ["b"]
    assert room.players["a"].team == "red"


def test_switch_unknown_player():
    with pytest.raises(NotInRoom):
        switch_team(make_room(), "ghost")


def test_remove_member():
    room = make_room()
    add(room, "a")
    add(room, "b")
    removed = remove_member(room, "a")
    assert removed.id == "a"
    assert room.red == [] and "a" not in room.players
    assert remove_member(room, "a") is None


def test_rosters_payload_keeps_join_order():
    room = make_room(size=3)
    for pid in ("a", "b", "c"):
        add(room, pid)
    payload = rosters_payload(room)
    assert [p["id"] for p in payload["redTeam"]] == ["a", "c"]
    assert [p["id"] for p in payload["blueTeam"]] == ["b"]


@pytest.mark.parametrize("seed", range(5))
def test_random_membership_changes_keep_rosters_consistent(seed):
    rng = random.Random(seed)
    room = make_room(size=3)
    next_id = 0
    for _ in range(300):
        op = rng.choice(("join", "switch", "leave"))
        if op == "join":
            add(room, f"p{next_id}")
            next_id += 1
        elif op == "switch" and room.players:
            try:
                switch_team(room, rng.choice(list(room.players)))
            except TeamFull:
                pass
        elif op == "leave" and room.players:
            remove_member(room, rng.choice(list(room.players)))
        assert_invariants(room)

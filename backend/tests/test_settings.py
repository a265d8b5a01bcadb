import pytest

from wordclash.game.errors import InvalidNickname
from wordclash.game.models import Settings
from wordclash.game.settings import normalize_nickname, normalize_settings, round_total_cards

BASE = Settings(max_team_size=5, total_cards=40)


def test_derived_values():
    s = Settings(max_team_size=3, total_cards=10)
    assert s.cards_per_team == 5
    assert s.required_players == 6
    assert s.to_dict() == {"maxTeamSize": 3, "totalCards": 10, "cardsPerTeam": 5, "requiredPlayers": 6}


@pytest.mark.parametrize("raw, expected", [(9, 7), (0, 1), (-3, 1), (4, 4), ("3", 3), (2.7, 2)])
def test_team_size_is_clamped(raw, expected):
    assert normalize_settings({"maxTeamSize": raw}, BASE).max_team_size == expected


@pytest.mark.parametrize("raw, expected", [(7, 8), (5, 6), (6, 6), (1, 4), (0, 4), (1000, 100), ("12", 12)])
def test_total_cards_rounded_to_even(raw, expected):
    assert normalize_settings({"totalCards": raw}, BASE).total_cards == expected


def test_round_total_cards_respects_odd_upper_bound():
    assert round_total_cards(99, max_total=51) == 50


@pytest.mark.parametrize("raw", [None, {}, {"maxTeamSize": "big", "totalCards": "many"}, {"totalCards": True}, "x"])
def test_unusable_values_keep_the_base(raw):
    assert normalize_settings(raw, BASE) == BASE


def test_snake_case_keys_are_accepted():
    s = normalize_settings({"max_team_size": 2, "total_cards": 10}, BASE)
    assert (s.max_team_size, s.total_cards) == (2, 10)


def test_nickname_trimmed_and_truncated():
    assert normalize_nickname("  ab ") == "ab"
    assert normalize_nickname("abcdefghijkl") == "abcdefghij"


@pytest.mark.parametrize("raw", ["", "a", None, " b ", "<b>hi", "tab\there"])
def test_bad_nicknames_rejected(raw):
    with pytest.raises(InvalidNickname):
        normalize_nickname(raw)

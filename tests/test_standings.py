"""Tests for the ladder table and rating history views."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.common import Match, Player
from domain.standings import (
    build_standings,
    describe_match,
    display_streak,
    points_per_game,
    rating_history,
    win_rate,
)


def _match(match_id: str, *, a_wins: bool, change: float, player_b_id: str = "b") -> Match:
    return Match(
        id=match_id,
        player_a_id="a",
        player_a_name="Ana",
        player_b_id=player_b_id,
        player_b_name="Ben" if player_b_id == "b" else "Cal",
        score_a=21 if a_wins else 14,
        score_b=14 if a_wins else 21,
        winner_id="a" if a_wins else player_b_id,
        loser_id=player_b_id if a_wins else "a",
        rating_change_a=change if a_wins else -change,
        rating_change_b=-change if a_wins else change,
        created_at=datetime(2024, 2, 1, 18, 30),
    )


def test_build_standings_orders_by_rating() -> None:
    players = [
        Player(id="low", name="Low", rating=980.4, starting_rating=1000.0, losses=2, games_played=2, streak="L2"),
        Player(id="top", name="Top", rating=1041.5, starting_rating=1000.0, wins=2, losses=1, games_played=3, streak="W2"),
        Player(id="new", name="New", rating=1000.0),
    ]

    rows = build_standings(players)

    assert [row.player_id for row in rows] == ["top", "new", "low"]
    assert [row.rank for row in rows] == [1, 2, 3]
    top = rows[0]
    assert top.rating == 1042
    assert top.win_rate == 67
    assert top.points_per_game == pytest.approx(13.8)
    assert rows[1].streak == "-"
    assert rows[1].win_rate == 0
    assert rows[1].points_per_game == 0.0
    assert rows[2].points_per_game == pytest.approx(-9.8)


def test_win_rate_rounds_half_up() -> None:
    player = Player(id="p", name="P", rating=1000.0, wins=1, losses=7, games_played=8)
    assert win_rate(player) == 13


def test_points_per_game_defaults_missing_starting_rating() -> None:
    player = Player(id="p", name="P", rating=1012.0, wins=2, games_played=2)
    assert points_per_game(player) == pytest.approx(6.0)
    assert points_per_game(player, default_starting_rating=1200.0) == pytest.approx(-94.0)


def test_display_streak() -> None:
    assert display_streak("") == "-"
    assert display_streak(None) == "-"
    assert display_streak("W4") == "W4"


def test_rating_history_walks_deltas() -> None:
    player = Player(id="a", name="Ana", rating=1003.0, starting_rating=1000.0)
    matches = [
        _match("m1", a_wins=True, change=10.0),
        _match("m2", a_wins=False, change=7.0, player_b_id="c"),
    ]

    points = rating_history(player, matches)

    assert [point.match_id for point in points] == [None, "m1", "m2"]
    assert [point.rating for point in points] == pytest.approx([1000.0, 1010.0, 1003.0])
    assert points[1].opponent_name == "Ben"
    assert points[2].opponent_name == "Cal"
    assert points[2].rating_change == pytest.approx(-7.0)


def test_rating_history_from_opponent_side_skips_other_matches() -> None:
    player = Player(id="b", name="Ben", rating=990.0)
    matches = [
        _match("m1", a_wins=True, change=10.0),
        _match("m2", a_wins=False, change=7.0, player_b_id="c"),
    ]

    points = rating_history(player, matches)

    assert [point.match_id for point in points] == [None, "m1"]
    assert points[-1].rating == pytest.approx(990.0)
    assert points[-1].opponent_name == "Ana"


def test_describe_match() -> None:
    assert describe_match(_match("m1", a_wins=True, change=4.19)) == "Ana (+4) def Ben (-4) - 21-14"
    assert describe_match(_match("m2", a_wins=False, change=23.5, player_b_id="c")) == (
        "Cal (+24) def Ana (-23) - 21-14"
    )

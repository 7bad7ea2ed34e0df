"""Unit tests for streak labels."""

from __future__ import annotations

import pytest

from domain.ratings.streak import next_streak, parse_streak, streak_from_outcomes, unwind_streak


@pytest.mark.parametrize(
    ("current", "did_win", "expected"),
    [
        ("", True, "W1"),
        ("", False, "L1"),
        (None, True, "W1"),
        ("-", False, "L1"),
        ("W2", True, "W3"),
        ("W2", False, "L1"),
        ("L4", False, "L5"),
        ("L4", True, "W1"),
        ("W9", True, "W10"),
    ],
)
def test_next_streak(current: str | None, did_win: bool, expected: str) -> None:
    assert next_streak(current, did_win) == expected


def test_unparseable_count_is_read_as_zero() -> None:
    assert parse_streak("Wx") == ("W", 0)
    assert next_streak("Wx", True) == "W1"
    assert next_streak("L", False) == "L1"


@pytest.mark.parametrize(
    ("current", "was_win", "expected"),
    [
        ("W3", True, "W2"),
        ("L2", False, "L1"),
        ("W1", True, ""),
        ("L1", False, ""),
        ("L2", True, ""),
        ("W5", False, ""),
        ("", True, ""),
        ("-", False, ""),
    ],
)
def test_unwind_streak(current: str, was_win: bool, expected: str) -> None:
    assert unwind_streak(current, was_win) == expected


def test_streak_from_outcomes_keeps_only_the_last_run() -> None:
    assert streak_from_outcomes([]) == ""
    assert streak_from_outcomes([True, True, False]) == "L1"
    assert streak_from_outcomes([False, True, True, True]) == "W3"

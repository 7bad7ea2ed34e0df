"""Win/loss streak labels ("W3", "L1", or empty)."""

from __future__ import annotations

from collections.abc import Iterable

# Seeded records carry "-" for "no streak yet".
LEGACY_EMPTY_STREAK = "-"


def parse_streak(streak: str | None) -> tuple[str, int]:
    """Split a streak label into its letter and count.

    Empty and legacy labels come back as ``("", 0)``. An unparseable count is
    read as ``0``.
    """
    if not streak or streak == LEGACY_EMPTY_STREAK:
        return "", 0

    letter = streak[0]
    try:
        count = int(streak[1:])
    except ValueError:
        count = 0
    return letter, count


def next_streak(current: str | None, did_win: bool) -> str:
    """Advance a streak label by one result."""
    letter, count = parse_streak(current)
    if not letter:
        return "W1" if did_win else "L1"

    if (did_win and letter == "W") or (not did_win and letter == "L"):
        return f"{letter}{count + 1}"
    return "W1" if did_win else "L1"


def unwind_streak(current: str | None, was_win: bool) -> str:
    """Step a streak label back over one result, best effort.

    Only a matching label with a count above one can be decremented. Anything
    else means the value before that result is unknown, so the label is
    cleared.
    """
    letter, count = parse_streak(current)
    if not letter:
        return ""

    matches_result = (letter == "W" and was_win) or (letter == "L" and not was_win)
    if matches_result and count > 1:
        return f"{letter}{count - 1}"
    return ""


def streak_from_outcomes(outcomes: Iterable[bool]) -> str:
    """Rebuild a streak label from results in chronological order."""
    streak = ""
    for did_win in outcomes:
        streak = next_streak(streak, did_win)
    return streak


__all__ = [
    "LEGACY_EMPTY_STREAK",
    "next_streak",
    "parse_streak",
    "streak_from_outcomes",
    "unwind_streak",
]

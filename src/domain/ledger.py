"""Match ledger: apply, reverse and edit matches against a ledger store.

Every operation reads the players it touches, computes their new state in
memory and hands the store one atomic write. The store is injected, so the
same ledger runs against the in-memory store in tests and the SQL store in
production.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime
from enum import Enum

from domain.common import Match, MatchResult, Player
from domain.errors import MatchNotFound, PlayerNotFound, ValidationError
from domain.ratings.calculator import RatingParameters, compute_rating_change
from domain.ratings.streak import (
    LEGACY_EMPTY_STREAK,
    next_streak,
    streak_from_outcomes,
    unwind_streak,
)
from domain.store import LedgerStore, MatchCreate, MatchDelete, PlayerUpdate, WriteOperation

logger = logging.getLogger(__name__)


class StreakPolicy(str, Enum):
    """How a player's streak is rebuilt when a match is removed."""

    HISTORY = "history"
    UNWIND = "unwind"


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def new_match_id() -> str:
    return uuid.uuid4().hex


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def validate_submission(player_a_id: str, player_b_id: str, score_a: object, score_b: object) -> None:
    """Reject self-play, ties and missing or malformed scores."""
    if not player_a_id or not player_b_id:
        raise ValidationError("Both players must be selected")
    if player_a_id == player_b_id:
        raise ValidationError("A player cannot play against themselves")
    for label, score in (("score_a", score_a), ("score_b", score_b)):
        if score is None:
            raise ValidationError(f"{label} is required")
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"{label} must be an integer, got {score!r}")
        if score < 0:
            raise ValidationError(f"{label} must be >= 0, got {score}")
    if score_a == score_b:
        raise ValidationError("Match cannot end in a tie")


class MatchLedger:
    """Applies and reverses matches while keeping player aggregates consistent."""

    def __init__(
        self,
        store: LedgerStore,
        params: RatingParameters | None = None,
        *,
        rating_system: str | None = None,
        streak_policy: StreakPolicy = StreakPolicy.HISTORY,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_match_id,
    ) -> None:
        self.store = store
        self.params = params or RatingParameters()
        self.rating_system = rating_system
        self.streak_policy = streak_policy
        self.clock = clock
        self.id_factory = id_factory

    def apply(self, player_a_id: str, player_b_id: str, score_a: int, score_b: int) -> MatchResult:
        """Record a new match and update both players in one write."""
        validate_submission(player_a_id, player_b_id, score_a, score_b)

        originals = self._load_players((player_a_id, player_b_id))
        states = dict(originals)
        match, delta = self._apply_onto(states, player_a_id, player_b_id, score_a, score_b)

        self.store.atomic_write([*_player_updates(originals, states), MatchCreate(match)])
        logger.info(
            "applied match_id=%s %s %d-%d %s delta=%.3f",
            match.id,
            match.player_a_name,
            score_a,
            score_b,
            match.player_b_name,
            delta,
        )
        return _summarize(match, delta)

    def reverse(self, match_id: str) -> None:
        """Remove a match and undo its effect on both players."""
        match = self._load_match(match_id)
        originals = self._load_players((match.player_a_id, match.player_b_id))
        states = dict(originals)
        self._reverse_onto(states, match)

        self.store.atomic_write([*_player_updates(originals, states), MatchDelete(match.id)])
        logger.info("reversed match_id=%s", match.id)

    def edit(
        self,
        match_id: str,
        new_player_a_id: str,
        new_player_b_id: str,
        new_score_a: int,
        new_score_b: int,
    ) -> MatchResult:
        """Replace a match with a new one.

        Equivalent to ``reverse`` followed by ``apply`` (the replacement gets a
        new id and timestamp) but committed as a single write, so a failure
        leaves the old match in place.
        """
        validate_submission(new_player_a_id, new_player_b_id, new_score_a, new_score_b)

        old_match = self._load_match(match_id)
        involved = _unique(
            (old_match.player_a_id, old_match.player_b_id, new_player_a_id, new_player_b_id)
        )
        originals = self._load_players(involved)
        states = dict(originals)

        self._reverse_onto(states, old_match)
        new_match, delta = self._apply_onto(
            states,
            new_player_a_id,
            new_player_b_id,
            new_score_a,
            new_score_b,
        )

        self.store.atomic_write(
            [
                *_player_updates(originals, states),
                MatchDelete(old_match.id),
                MatchCreate(new_match),
            ]
        )
        logger.info(
            "edited match_id=%s -> match_id=%s delta=%.3f",
            old_match.id,
            new_match.id,
            delta,
        )
        return _summarize(new_match, delta)

    def _load_players(self, player_ids: Iterable[str]) -> dict[str, Player]:
        players: dict[str, Player] = {}
        for player_id in player_ids:
            player = self.store.get_player(player_id)
            if player is None:
                raise PlayerNotFound(player_id)
            players[player_id] = player
        return players

    def _load_match(self, match_id: str) -> Match:
        match = self.store.get_match(match_id)
        if match is None:
            raise MatchNotFound(match_id)
        return match

    def _apply_onto(
        self,
        states: dict[str, Player],
        player_a_id: str,
        player_b_id: str,
        score_a: int,
        score_b: int,
    ) -> tuple[Match, float]:
        player_a = states[player_a_id]
        player_b = states[player_b_id]
        a_won = score_a > score_b

        winner, loser = (player_a, player_b) if a_won else (player_b, player_a)
        winner_score, loser_score = (score_a, score_b) if a_won else (score_b, score_a)
        delta = compute_rating_change(
            winner.rating,
            loser.rating,
            winner_score,
            loser_score,
            self.params,
        )
        logger.debug(
            "rating change winner=%s (%.3f) loser=%s (%.3f) score=%d-%d delta=%.6f",
            winner.id,
            winner.rating,
            loser.id,
            loser.rating,
            winner_score,
            loser_score,
            delta,
        )

        states[winner.id] = _record_result(winner, won=True, rating_change=delta)
        states[loser.id] = _record_result(loser, won=False, rating_change=-delta)

        match = Match(
            id=self.id_factory(),
            player_a_id=player_a_id,
            player_a_name=player_a.name,
            player_b_id=player_b_id,
            player_b_name=player_b.name,
            score_a=score_a,
            score_b=score_b,
            winner_id=winner.id,
            loser_id=loser.id,
            rating_change_a=delta if a_won else -delta,
            rating_change_b=-delta if a_won else delta,
            created_at=self.clock(),
            rating_system=self.rating_system,
        )
        return match, delta

    def _reverse_onto(self, states: dict[str, Player], match: Match) -> None:
        for player_id in (match.player_a_id, match.player_b_id):
            player = states[player_id]
            won = match.winner_id == player_id
            states[player_id] = replace(
                player,
                rating=player.rating - match.rating_change_for(player_id),
                wins=max(0, player.wins - 1) if won else player.wins,
                losses=player.losses if won else max(0, player.losses - 1),
                games_played=max(0, player.games_played - 1),
                streak=self._previous_streak(player, match, won),
            )

    def _previous_streak(self, player: Player, match: Match, won: bool) -> str:
        if self.streak_policy is StreakPolicy.UNWIND:
            return unwind_streak(player.streak, won)

        history = self.store.list_player_matches(player.id)
        stored = "" if player.streak == LEGACY_EMPTY_STREAK else player.streak
        if streak_from_outcomes(earlier.winner_id == player.id for earlier in history) != stored:
            # Streak predates the stored matches; step it back instead.
            return unwind_streak(player.streak, won)

        return streak_from_outcomes(
            earlier.winner_id == player.id for earlier in history if earlier.id != match.id
        )


def _record_result(player: Player, *, won: bool, rating_change: float) -> Player:
    return replace(
        player,
        rating=player.rating + rating_change,
        wins=player.wins + (1 if won else 0),
        losses=player.losses + (0 if won else 1),
        games_played=player.games_played + 1,
        streak=next_streak(player.streak, won),
    )


def _player_updates(originals: dict[str, Player], states: dict[str, Player]) -> list[WriteOperation]:
    # Every player read is written back under the version it was read at.
    return [
        PlayerUpdate(
            player=replace(states[player_id], version=original.version + 1),
            expected_version=original.version,
        )
        for player_id, original in originals.items()
    ]


def _summarize(match: Match, delta: float) -> MatchResult:
    a_won = match.winner_id == match.player_a_id
    return MatchResult(
        match_id=match.id,
        winner_name=match.player_a_name if a_won else match.player_b_name,
        loser_name=match.player_b_name if a_won else match.player_a_name,
        rating_change=round_half_up(delta),
    )


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


__all__ = [
    "MatchLedger",
    "StreakPolicy",
    "new_match_id",
    "round_half_up",
    "utc_now",
    "validate_submission",
]

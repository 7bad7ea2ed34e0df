"""Fold stored matches from each player's starting state to check ledger drift."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

from domain.common import Match, Player
from domain.ratings.streak import LEGACY_EMPTY_STREAK, next_streak
from domain.store import PlayerUpdate

DEFAULT_STARTING_RATING = 1000.0


@dataclass(frozen=True)
class PlayerTally:
    """Aggregates a player should hold given the matches currently stored."""

    player_id: str
    rating: float
    wins: int
    losses: int
    games_played: int
    streak: str


@dataclass(frozen=True)
class LedgerDrift:
    player_id: str
    player_name: str
    field: str
    stored: object
    expected: object


def sort_matches(matches: Sequence[Match]) -> list[Match]:
    """Creation order; ``sorted`` is stable so ties keep store order."""
    return sorted(matches, key=lambda match: match.created_at)


def replay_players(
    players: Sequence[Player],
    matches: Sequence[Match],
    *,
    default_starting_rating: float = DEFAULT_STARTING_RATING,
) -> dict[str, PlayerTally]:
    """Fold every match, in the given order, through the apply step."""
    tallies = {
        player.id: PlayerTally(
            player_id=player.id,
            rating=(
                player.starting_rating
                if player.starting_rating is not None
                else default_starting_rating
            ),
            wins=0,
            losses=0,
            games_played=0,
            streak="",
        )
        for player in players
    }

    for match in matches:
        for player_id in (match.player_a_id, match.player_b_id):
            tally = tallies.get(player_id)
            if tally is None:
                continue
            won = match.winner_id == player_id
            tallies[player_id] = replace(
                tally,
                rating=tally.rating + match.rating_change_for(player_id),
                wins=tally.wins + (1 if won else 0),
                losses=tally.losses + (0 if won else 1),
                games_played=tally.games_played + 1,
                streak=next_streak(tally.streak, won),
            )
    return tallies


def find_drift(
    players: Sequence[Player],
    matches: Sequence[Match],
    *,
    include_streak: bool = True,
    default_starting_rating: float = DEFAULT_STARTING_RATING,
) -> list[LedgerDrift]:
    """List every stored field that disagrees with the replayed value."""
    tallies = replay_players(
        players,
        matches,
        default_starting_rating=default_starting_rating,
    )
    fields = ["wins", "losses", "games_played"]
    if include_streak:
        fields.append("streak")

    drift: list[LedgerDrift] = []
    for player in players:
        tally = tallies[player.id]
        if not math.isclose(player.rating, tally.rating, rel_tol=0.0, abs_tol=1e-6):
            drift.append(
                LedgerDrift(player.id, player.name, "rating", player.rating, tally.rating)
            )
        for field in fields:
            stored = getattr(player, field)
            expected = getattr(tally, field)
            if field == "streak" and stored == LEGACY_EMPTY_STREAK:
                stored = ""
            if stored != expected:
                drift.append(LedgerDrift(player.id, player.name, field, stored, expected))
    return drift


def repaired_player(player: Player, tally: PlayerTally) -> Player:
    """Copy of ``player`` carrying the replayed aggregates."""
    streak = tally.streak
    if not streak and player.streak == LEGACY_EMPTY_STREAK:
        streak = player.streak
    return replace(
        player,
        rating=tally.rating,
        wins=tally.wins,
        losses=tally.losses,
        games_played=tally.games_played,
        streak=streak,
    )


def repair_operations(
    players: Sequence[Player],
    matches: Sequence[Match],
    *,
    default_starting_rating: float = DEFAULT_STARTING_RATING,
) -> list[PlayerUpdate]:
    """Player updates that overwrite drifted aggregates with replayed ones."""
    tallies = replay_players(
        players,
        matches,
        default_starting_rating=default_starting_rating,
    )
    drifted = {
        drift.player_id
        for drift in find_drift(players, matches, default_starting_rating=default_starting_rating)
    }
    operations: list[PlayerUpdate] = []
    for player in players:
        if player.id not in drifted:
            continue
        repaired = repaired_player(player, tallies[player.id])
        operations.append(
            PlayerUpdate(
                player=replace(repaired, version=player.version + 1),
                expected_version=player.version,
            )
        )
    return operations


__all__ = [
    "DEFAULT_STARTING_RATING",
    "LedgerDrift",
    "PlayerTally",
    "find_drift",
    "repair_operations",
    "repaired_player",
    "replay_players",
    "sort_matches",
]

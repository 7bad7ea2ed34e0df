"""Read-side views: ladder table, rating trajectory and match descriptions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from domain.common import Match, Player
from domain.ledger import round_half_up
from domain.replay import DEFAULT_STARTING_RATING
from domain.ratings.streak import LEGACY_EMPTY_STREAK


@dataclass(frozen=True)
class StandingRow:
    rank: int
    player_id: str
    name: str
    rating: int
    wins: int
    losses: int
    games_played: int
    win_rate: int
    points_per_game: float
    streak: str


@dataclass(frozen=True)
class RatingPoint:
    """Rating after one match (or the starting point when ``match_id`` is None)."""

    match_id: str | None
    created_at: datetime | None
    opponent_name: str | None
    rating_change: float
    rating: float


def win_rate(player: Player) -> int:
    """Whole-number win percentage; zero before the first game."""
    if player.games_played == 0:
        return 0
    return round_half_up(player.wins / player.games_played * 100)


def points_per_game(player: Player, *, default_starting_rating: float = DEFAULT_STARTING_RATING) -> float:
    if player.games_played == 0:
        return 0.0
    starting_rating = (
        player.starting_rating if player.starting_rating is not None else default_starting_rating
    )
    return round((player.rating - starting_rating) / player.games_played, 1)


def display_streak(streak: str | None) -> str:
    return streak or LEGACY_EMPTY_STREAK


def build_standings(players: Sequence[Player]) -> list[StandingRow]:
    """Ladder table ordered by rating, highest first."""
    ordered = sorted(players, key=lambda player: player.rating, reverse=True)
    return [
        StandingRow(
            rank=rank,
            player_id=player.id,
            name=player.name,
            rating=round_half_up(player.rating),
            wins=player.wins,
            losses=player.losses,
            games_played=player.games_played,
            win_rate=win_rate(player),
            points_per_game=points_per_game(player),
            streak=display_streak(player.streak),
        )
        for rank, player in enumerate(ordered, start=1)
    ]


def rating_history(
    player: Player,
    matches: Sequence[Match],
    *,
    default_starting_rating: float = DEFAULT_STARTING_RATING,
) -> list[RatingPoint]:
    """Walk a player's rating from the starting value through each stored delta.

    ``matches`` must be in creation order; matches the player did not take
    part in are skipped.
    """
    rating = player.starting_rating if player.starting_rating is not None else default_starting_rating
    points = [
        RatingPoint(match_id=None, created_at=None, opponent_name=None, rating_change=0.0, rating=rating)
    ]
    for match in matches:
        if not match.involves(player.id):
            continue
        change = match.rating_change_for(player.id)
        rating += change
        opponent_name = match.player_b_name if match.player_a_id == player.id else match.player_a_name
        points.append(
            RatingPoint(
                match_id=match.id,
                created_at=match.created_at,
                opponent_name=opponent_name,
                rating_change=change,
                rating=rating,
            )
        )
    return points


def describe_match(match: Match) -> str:
    """One-line summary, e.g. ``"Wesley (+5) def Derek (-5) - 21-15"``."""
    a_won = match.winner_id == match.player_a_id
    winner = match.player_a_name if a_won else match.player_b_name
    loser = match.player_b_name if a_won else match.player_a_name
    winner_change = match.rating_change_a if a_won else match.rating_change_b
    loser_change = match.rating_change_b if a_won else match.rating_change_a
    winner_score = max(match.score_a, match.score_b)
    loser_score = min(match.score_a, match.score_b)
    return (
        f"{winner} (+{round_half_up(winner_change)}) def "
        f"{loser} ({round_half_up(loser_change)}) - {winner_score}-{loser_score}"
    )


__all__ = [
    "RatingPoint",
    "StandingRow",
    "build_standings",
    "describe_match",
    "display_streak",
    "points_per_game",
    "rating_history",
    "win_rate",
]

"""Margin-of-victory Elo logic for the ladder."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingParameters:
    initial_rating: float = 1000.0
    target_score: int = 21
    k_factor: float = 8.0
    max_change: float = 30.0
    scale_factor: float = 400.0


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def compute_rating_change(
    winner_rating: float,
    loser_rating: float,
    winner_score: int,
    loser_score: int,
    params: RatingParameters | None = None,
) -> float:
    """Return the rating delta to add to the winner and subtract from the loser.

    The first score is always treated as the winner's; callers reject ties
    before getting here. The point differential stops counting at
    ``target_score`` and the final value never exceeds ``max_change``.
    """
    params = params or RatingParameters()

    point_differential = min(winner_score - loser_score, params.target_score)
    expected = calculate_expected_score(
        rating=winner_rating,
        opponent_rating=loser_rating,
        scale_factor=params.scale_factor,
    )
    raw_change = params.k_factor * point_differential * (11 / params.target_score) * (1.0 - expected)
    return min(raw_change, params.max_change)


__all__ = ["RatingParameters", "calculate_expected_score", "compute_rating_change"]

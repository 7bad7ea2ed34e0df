"""Rating formula and streak modules."""

from domain.ratings.calculator import (
    RatingParameters,
    calculate_expected_score,
    compute_rating_change,
)
from domain.ratings.config import LadderSystemConfig, load_ladder_system_configs
from domain.ratings.streak import next_streak, streak_from_outcomes, unwind_streak

__all__ = [
    "LadderSystemConfig",
    "RatingParameters",
    "calculate_expected_score",
    "compute_rating_change",
    "load_ladder_system_configs",
    "next_streak",
    "streak_from_outcomes",
    "unwind_streak",
]

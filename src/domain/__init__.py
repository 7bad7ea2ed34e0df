"""Ladder domain modules."""

from domain.common import Match, MatchResult, Player
from domain.errors import LadderError, NotFoundError, StoreError, ValidationError
from domain.ledger import MatchLedger, StreakPolicy

__all__ = [
    "LadderError",
    "Match",
    "MatchLedger",
    "MatchResult",
    "NotFoundError",
    "Player",
    "StoreError",
    "StreakPolicy",
    "ValidationError",
]

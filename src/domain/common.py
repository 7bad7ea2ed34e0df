"""Shared ladder records passed between the ledger and its stores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Player:
    """Current ladder standing for one player."""

    id: str
    name: str
    rating: float
    starting_rating: float | None = None
    wins: int = 0
    losses: int = 0
    games_played: int = 0
    streak: str = ""
    version: int = 0


@dataclass(frozen=True)
class Match:
    """One applied match, with the deltas that were actually written."""

    id: str
    player_a_id: str
    player_a_name: str
    player_b_id: str
    player_b_name: str
    score_a: int
    score_b: int
    winner_id: str
    loser_id: str
    rating_change_a: float
    rating_change_b: float
    created_at: datetime
    rating_system: str | None = None

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player_a_id, self.player_b_id)

    def rating_change_for(self, player_id: str) -> float:
        if player_id == self.player_a_id:
            return self.rating_change_a
        if player_id == self.player_b_id:
            return self.rating_change_b
        raise ValueError(f"player_id={player_id} did not play in match_id={self.id}")


@dataclass(frozen=True)
class MatchResult:
    """Summary returned to callers after a match is recorded."""

    match_id: str
    winner_name: str
    loser_name: str
    rating_change: int


__all__ = ["Match", "MatchResult", "Player"]

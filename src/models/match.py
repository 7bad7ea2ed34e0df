"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Match(Base):
    """One applied match with the rating deltas written at submission time."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("player_a_id <> player_b_id", name="ck_matches_distinct_players"),
        CheckConstraint("score_a <> score_b", name="ck_matches_no_tie"),
        CheckConstraint("score_a >= 0 AND score_b >= 0", name="ck_matches_scores"),
        Index("idx_matches_player_a_created", "player_a_id", "created_at"),
        Index("idx_matches_player_b_created", "player_b_id", "created_at"),
        Index("idx_matches_created", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    player_a_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player_a_name: Mapped[str] = mapped_column(String(128), nullable=False)
    player_b_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player_b_name: Mapped[str] = mapped_column(String(128), nullable=False)
    score_a: Mapped[int] = mapped_column(Integer, nullable=False)
    score_b: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    loser_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    rating_change_a: Mapped[float] = mapped_column(Float, nullable=False)
    rating_change_b: Mapped[float] = mapped_column(Float, nullable=False)
    rating_system: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

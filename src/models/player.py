"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Player(Base):
    """Current ladder standing for one player (mutated in place by the ledger)."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("wins >= 0", name="ck_players_wins"),
        CheckConstraint("losses >= 0", name="ck_players_losses"),
        CheckConstraint("games_played >= 0", name="ck_players_games_played"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    starting_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

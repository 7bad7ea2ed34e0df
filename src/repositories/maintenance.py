"""One-off data jobs: demo seeding and the starting-rating backfill."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Player
from domain.ratings.streak import LEGACY_EMPTY_STREAK
from models import Player as PlayerRow

logger = logging.getLogger(__name__)

SEED_PLAYERS: tuple[tuple[str, float], ...] = (
    ("Wesley", 1200.0),
    ("Derek", 1180.0),
    ("Matt", 1160.0),
    ("JWin", 1140.0),
    ("Ryuta", 1120.0),
    ("JLin", 1100.0),
    ("Sophia", 1080.0),
    ("Victoria", 1060.0),
    ("Karoline", 1040.0),
    ("Cynt", 1020.0),
)

KNOWN_STARTING_RATINGS: Mapping[str, float] = dict(SEED_PLAYERS)


class PlayerSink(Protocol):
    def add_player(self, player: Player) -> Player: ...


def seed_players(
    store: PlayerSink,
    *,
    id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> list[Player]:
    """Insert the demo roster. Not idempotent; run once per database."""
    created = [
        store.add_player(
            Player(
                id=id_factory(),
                name=name,
                rating=rating,
                starting_rating=rating,
                streak=LEGACY_EMPTY_STREAK,
            )
        )
        for name, rating in SEED_PLAYERS
    ]
    logger.info("seeded %d players", len(created))
    return created


def backfill_starting_ratings(
    session_factory: sessionmaker[Session],
    *,
    known_ratings: Mapping[str, float] = KNOWN_STARTING_RATINGS,
    default_rating: float = 1000.0,
) -> int:
    """Set ``starting_rating`` from a name lookup, defaulting unknown names.

    Only rows whose value differs are touched; all updates share one
    transaction. Returns the number of updated players.
    """
    updated = 0
    with session_factory() as session, session.begin():
        for row in session.scalars(select(PlayerRow)):
            starting_rating = known_ratings.get(row.name, default_rating)
            if row.starting_rating == starting_rating:
                continue
            logger.info("player %s: starting_rating %s -> %s", row.name, row.starting_rating, starting_rating)
            row.starting_rating = starting_rating
            updated += 1
    return updated


__all__ = [
    "KNOWN_STARTING_RATINGS",
    "SEED_PLAYERS",
    "backfill_starting_ratings",
    "seed_players",
]

"""SQLAlchemy-backed ledger store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Match, Player
from domain.errors import StoreError, VersionConflict
from domain.store import MatchCreate, MatchDelete, PlayerUpdate, WriteOperation
from models import Base
from models import Match as MatchRow
from models import Player as PlayerRow

logger = logging.getLogger(__name__)


def ensure_ladder_schema(engine: Engine) -> None:
    """Create the players and matches tables if they do not exist."""
    with engine.begin() as connection:
        Base.metadata.create_all(bind=connection, checkfirst=True)


def player_from_row(row: PlayerRow) -> Player:
    return Player(
        id=row.id,
        name=row.name,
        rating=row.rating,
        starting_rating=row.starting_rating,
        wins=row.wins,
        losses=row.losses,
        games_played=row.games_played,
        streak=row.streak,
        version=row.version,
    )


def match_from_row(row: MatchRow) -> Match:
    return Match(
        id=row.id,
        player_a_id=row.player_a_id,
        player_a_name=row.player_a_name,
        player_b_id=row.player_b_id,
        player_b_name=row.player_b_name,
        score_a=row.score_a,
        score_b=row.score_b,
        winner_id=row.winner_id,
        loser_id=row.loser_id,
        rating_change_a=row.rating_change_a,
        rating_change_b=row.rating_change_b,
        created_at=row.created_at,
        rating_system=row.rating_system,
    )


def _player_values(player: Player) -> dict[str, Any]:
    return {
        "name": player.name,
        "rating": player.rating,
        "starting_rating": player.starting_rating,
        "wins": player.wins,
        "losses": player.losses,
        "games_played": player.games_played,
        "streak": player.streak,
        "version": player.version,
    }


def _match_values(match: Match) -> dict[str, Any]:
    return {
        "id": match.id,
        "player_a_id": match.player_a_id,
        "player_a_name": match.player_a_name,
        "player_b_id": match.player_b_id,
        "player_b_name": match.player_b_name,
        "score_a": match.score_a,
        "score_b": match.score_b,
        "winner_id": match.winner_id,
        "loser_id": match.loser_id,
        "rating_change_a": match.rating_change_a,
        "rating_change_b": match.rating_change_b,
        "rating_system": match.rating_system,
        "created_at": match.created_at,
    }


class SqlLedgerStore:
    """Ledger store where each ``atomic_write`` is one database transaction."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_player(self, player_id: str) -> Player | None:
        with self.session_factory() as session:
            row = session.get(PlayerRow, player_id)
            return None if row is None else player_from_row(row)

    def get_match(self, match_id: str) -> Match | None:
        with self.session_factory() as session:
            row = session.get(MatchRow, match_id)
            return None if row is None else match_from_row(row)

    def list_players(self) -> list[Player]:
        with self.session_factory() as session:
            rows = session.scalars(select(PlayerRow).order_by(PlayerRow.rating.desc(), PlayerRow.id))
            return [player_from_row(row) for row in rows]

    def list_matches(self) -> list[Match]:
        with self.session_factory() as session:
            rows = session.scalars(select(MatchRow).order_by(MatchRow.created_at, MatchRow.id))
            return [match_from_row(row) for row in rows]

    def list_player_matches(self, player_id: str) -> list[Match]:
        statement = (
            select(MatchRow)
            .where(or_(MatchRow.player_a_id == player_id, MatchRow.player_b_id == player_id))
            .order_by(MatchRow.created_at, MatchRow.id)
        )
        with self.session_factory() as session:
            return [match_from_row(row) for row in session.scalars(statement)]

    def add_player(self, player: Player) -> Player:
        try:
            with self.session_factory() as session, session.begin():
                session.execute(insert(PlayerRow).values(id=player.id, **_player_values(player)))
        except IntegrityError as exc:
            raise StoreError(f"player '{player.id}' already exists") from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"could not add player '{player.id}': {exc}") from exc
        return player

    def atomic_write(self, operations: Sequence[WriteOperation]) -> None:
        """Apply every operation in one transaction, or none of them."""
        try:
            with self.session_factory() as session, session.begin():
                for operation in operations:
                    self._execute(session, operation)
        except SQLAlchemyError as exc:
            raise StoreError(f"atomic write failed: {exc}") from exc

    def _execute(self, session: Session, operation: WriteOperation) -> None:
        if isinstance(operation, PlayerUpdate):
            player = operation.player
            result = session.execute(
                update(PlayerRow)
                .where(PlayerRow.id == player.id, PlayerRow.version == operation.expected_version)
                .values(**_player_values(player))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                actual_version = session.scalar(
                    select(PlayerRow.version).where(PlayerRow.id == player.id)
                )
                logger.warning(
                    "version conflict player_id=%s expected=%s actual=%s",
                    player.id,
                    operation.expected_version,
                    actual_version,
                )
                raise VersionConflict(player.id, operation.expected_version, actual_version)
        elif isinstance(operation, MatchCreate):
            session.execute(insert(MatchRow).values(**_match_values(operation.match)))
        elif isinstance(operation, MatchDelete):
            result = session.execute(
                delete(MatchRow)
                .where(MatchRow.id == operation.match_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise StoreError(f"match '{operation.match_id}' does not exist")
        else:
            raise TypeError(f"Unsupported write operation: {type(operation)!r}")


__all__ = [
    "SqlLedgerStore",
    "ensure_ladder_schema",
    "match_from_row",
    "player_from_row",
]

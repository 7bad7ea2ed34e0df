"""Database repository helpers."""

from repositories.ledger_repository import SqlLedgerStore, ensure_ladder_schema
from repositories.maintenance import backfill_starting_ratings, seed_players

__all__ = [
    "SqlLedgerStore",
    "backfill_starting_ratings",
    "ensure_ladder_schema",
    "seed_players",
]

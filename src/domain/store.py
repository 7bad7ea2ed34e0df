"""Store contract used by the match ledger, plus an in-memory implementation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from domain.common import Match, Player
from domain.errors import StoreError, VersionConflict


@dataclass(frozen=True)
class PlayerUpdate:
    """Overwrite a player, provided it is still at ``expected_version``."""

    player: Player
    expected_version: int


@dataclass(frozen=True)
class MatchCreate:
    match: Match


@dataclass(frozen=True)
class MatchDelete:
    match_id: str


WriteOperation = PlayerUpdate | MatchCreate | MatchDelete


@runtime_checkable
class LedgerStore(Protocol):
    """Everything the ledger needs from persistence."""

    def get_player(self, player_id: str) -> Player | None: ...

    def get_match(self, match_id: str) -> Match | None: ...

    def list_player_matches(self, player_id: str) -> list[Match]: ...

    def atomic_write(self, operations: Sequence[WriteOperation]) -> None: ...


class InMemoryLedgerStore:
    """Dict-backed store; matches keep insertion order as creation order."""

    def __init__(self, players: Sequence[Player] = ()) -> None:
        self._players: dict[str, Player] = {player.id: player for player in players}
        self._matches: dict[str, Match] = {}

    def add_player(self, player: Player) -> Player:
        if player.id in self._players:
            raise StoreError(f"player '{player.id}' already exists")
        self._players[player.id] = player
        return player

    def get_player(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    def get_match(self, match_id: str) -> Match | None:
        return self._matches.get(match_id)

    def list_players(self) -> list[Player]:
        return list(self._players.values())

    def list_matches(self) -> list[Match]:
        return list(self._matches.values())

    def list_player_matches(self, player_id: str) -> list[Match]:
        return [match for match in self._matches.values() if match.involves(player_id)]

    def atomic_write(self, operations: Sequence[WriteOperation]) -> None:
        # Validate everything first so a rejected write leaves no trace.
        pending_matches = set(self._matches)
        for operation in operations:
            if isinstance(operation, PlayerUpdate):
                current = self._players.get(operation.player.id)
                if current is None:
                    raise StoreError(f"player '{operation.player.id}' does not exist")
                if current.version != operation.expected_version:
                    raise VersionConflict(
                        operation.player.id,
                        operation.expected_version,
                        current.version,
                    )
            elif isinstance(operation, MatchCreate):
                if operation.match.id in pending_matches:
                    raise StoreError(f"match '{operation.match.id}' already exists")
                pending_matches.add(operation.match.id)
            elif isinstance(operation, MatchDelete):
                if operation.match_id not in pending_matches:
                    raise StoreError(f"match '{operation.match_id}' does not exist")
                pending_matches.discard(operation.match_id)
            else:
                raise TypeError(f"Unsupported write operation: {type(operation)!r}")

        for operation in operations:
            if isinstance(operation, PlayerUpdate):
                self._players[operation.player.id] = operation.player
            elif isinstance(operation, MatchCreate):
                self._matches[operation.match.id] = operation.match
            else:
                del self._matches[operation.match_id]


__all__ = [
    "InMemoryLedgerStore",
    "LedgerStore",
    "MatchCreate",
    "MatchDelete",
    "PlayerUpdate",
    "WriteOperation",
]

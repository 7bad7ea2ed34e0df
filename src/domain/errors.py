"""Ledger error types."""

from __future__ import annotations


class LadderError(Exception):
    """Base class for every failure raised by the ladder."""


class ValidationError(LadderError, ValueError):
    """Match input rejected before touching the store."""


class NotFoundError(LadderError, LookupError):
    """A referenced player or match does not exist."""


class PlayerNotFound(NotFoundError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"player '{player_id}' not found")
        self.player_id = player_id


class MatchNotFound(NotFoundError):
    def __init__(self, match_id: str) -> None:
        super().__init__(f"match '{match_id}' not found")
        self.match_id = match_id


class StoreError(LadderError):
    """The store could not commit an atomic write; nothing was applied."""


class VersionConflict(StoreError):
    """A player changed between the ledger's read and its write."""

    def __init__(self, player_id: str, expected_version: int, actual_version: int | None) -> None:
        super().__init__(
            f"player '{player_id}' was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        self.player_id = player_id
        self.expected_version = expected_version
        self.actual_version = actual_version


__all__ = [
    "LadderError",
    "MatchNotFound",
    "NotFoundError",
    "PlayerNotFound",
    "StoreError",
    "ValidationError",
    "VersionConflict",
]

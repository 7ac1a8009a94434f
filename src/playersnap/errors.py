"""Exceptions raised by the snapshot pipeline."""

from __future__ import annotations

from typing import Optional


class PlayerSnapError(Exception):
    """Base class for all playersnap domain errors."""


class DuplicateKeyError(PlayerSnapError, ValueError):
    """Raised when a player appears more than once within one input batch."""

    def __init__(self, player_name: str, source: str):
        super().__init__(f"Player {player_name!r} appears more than once in {source}")
        self.player_name = player_name
        self.source = source


class EmptySequenceError(PlayerSnapError):
    """Raised when a history utility is given a snapshot with no season stats."""


class MalformedFactError(PlayerSnapError, ValueError):
    """Raised when a fact row is missing a required field or has a bad value."""

    def __init__(self, message: str, *, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class SeasonMismatchError(PlayerSnapError):
    """Raised when merge or storage inputs do not line up on a single season."""


__all__ = [
    "PlayerSnapError",
    "DuplicateKeyError",
    "EmptySequenceError",
    "MalformedFactError",
    "SeasonMismatchError",
]

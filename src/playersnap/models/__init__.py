"""Domain models for cumulative player snapshots."""

from .player import (
    ATTRIBUTE_FIELDS,
    PlayerSeasonFact,
    PlayerSnapshot,
    ScoringClass,
    SeasonStats,
)

__all__ = [
    "ATTRIBUTE_FIELDS",
    "PlayerSeasonFact",
    "PlayerSnapshot",
    "ScoringClass",
    "SeasonStats",
]

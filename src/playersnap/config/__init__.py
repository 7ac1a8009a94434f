"""Configuration helpers for scoring tiers and runtime settings."""

from .scoring import SCORING_TIERS, ScoringTier, get_tier, iter_tiers
from .settings import Settings, load_settings

__all__ = [
    "SCORING_TIERS",
    "ScoringTier",
    "Settings",
    "get_tier",
    "iter_tiers",
    "load_settings",
]

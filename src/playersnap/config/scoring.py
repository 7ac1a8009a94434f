"""Scoring tier configuration used to classify seasons by points per game."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from playersnap.models import ScoringClass


@dataclass(frozen=True)
class ScoringTier:
    scoring_class: ScoringClass
    # Strict lower bound; None marks the catch-all tier.
    min_points: Optional[float]

    def matches(self, points: float) -> bool:
        return self.min_points is None or points > self.min_points


# Ordered top-down, first match wins.
SCORING_TIERS: Tuple[ScoringTier, ...] = (
    ScoringTier(ScoringClass.STAR, 20.0),
    ScoringTier(ScoringClass.GOOD, 15.0),
    ScoringTier(ScoringClass.AVERAGE, 10.0),
    ScoringTier(ScoringClass.BAD, None),
)


def iter_tiers() -> Iterable[ScoringTier]:
    """Return the configured tiers in evaluation order."""

    return iter(SCORING_TIERS)


def get_tier(scoring_class: ScoringClass | str) -> ScoringTier:
    """Fetch the tier for a class, raising KeyError if missing."""

    try:
        key = ScoringClass(scoring_class)
    except ValueError:
        raise KeyError(f"No scoring tier configured for {scoring_class!r}") from None
    for tier in SCORING_TIERS:
        if tier.scoring_class is key:
            return tier
    raise KeyError(f"No scoring tier configured for {scoring_class!r}")  # pragma: no cover

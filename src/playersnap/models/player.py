"""Canonical player models shared across ingestion, merge and storage layers."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


ATTRIBUTE_FIELDS: Tuple[str, ...] = (
    "height",
    "college",
    "country",
    "draft_year",
    "draft_round",
    "draft_number",
)


class ScoringClass(str, Enum):
    STAR = "star"
    GOOD = "good"
    AVERAGE = "average"
    BAD = "bad"


class SeasonStats(BaseModel):
    """One season's averages as stored in a snapshot's history."""

    season: int
    gp: int = Field(..., ge=0)
    pts: float = Field(..., allow_inf_nan=False)
    reb: float = Field(..., allow_inf_nan=False)
    ast: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)


class PlayerSeasonFact(BaseModel):
    """A single (player, season) source row."""

    player_name: str = Field(..., min_length=1)
    height: Optional[str] = None
    college: Optional[str] = None
    country: Optional[str] = None
    draft_year: Optional[str] = None
    draft_round: Optional[str] = None
    draft_number: Optional[str] = None
    season: int
    gp: int = Field(..., ge=0)
    pts: float = Field(..., allow_inf_nan=False)
    reb: float = Field(..., allow_inf_nan=False)
    ast: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    def to_season_stats(self) -> SeasonStats:
        return SeasonStats(
            season=self.season,
            gp=self.gp,
            pts=self.pts,
            reb=self.reb,
            ast=self.ast,
        )


class PlayerSnapshot(BaseModel):
    """Cumulative state of one player as of ``current_season``."""

    player_name: str = Field(..., min_length=1)
    height: Optional[str] = None
    college: Optional[str] = None
    country: Optional[str] = None
    draft_year: Optional[str] = None
    draft_round: Optional[str] = None
    draft_number: Optional[str] = None
    season_stats: Tuple[SeasonStats, ...] = ()
    scoring_class: ScoringClass
    years_since_last_season: int = Field(0, ge=0)
    current_season: int

    model_config = ConfigDict(frozen=True)

    @property
    def is_active(self) -> bool:
        return self.years_since_last_season == 0

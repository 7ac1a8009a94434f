"""Input adapters that normalize raw player season data."""

from .seasons import (
    DEFAULT_SEASON_MAPPING,
    IngestReport,
    SeasonRow,
    load_season_facts,
    load_season_rows,
    row_to_fact,
    rows_to_facts,
)

__all__ = [
    "DEFAULT_SEASON_MAPPING",
    "IngestReport",
    "SeasonRow",
    "load_season_facts",
    "load_season_rows",
    "row_to_fact",
    "rows_to_facts",
]

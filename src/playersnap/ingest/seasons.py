"""Helpers to load player season CSVs and emit validated fact records."""

from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ValidationError

from playersnap.errors import MalformedFactError
from playersnap.models import ATTRIBUTE_FIELDS, PlayerSeasonFact


logger = logging.getLogger(__name__)

DEFAULT_SEASON_MAPPING = {
    "player_name": "player_name",
    "height": "height",
    "college": "college",
    "country": "country",
    "draft_year": "draft_year",
    "draft_round": "draft_round",
    "draft_number": "draft_number",
    "season": "season",
    "gp": "gp",
    "pts": "pts",
    "reb": "reb",
    "ast": "ast",
}

_REQUIRED_FIELDS: Tuple[str, ...] = ("player_name", "season", "gp", "pts", "reb", "ast")


class SeasonRow(BaseModel):
    """Raw CSV cells for one player season, blanks already mapped to None."""

    raw_player_name: Optional[str] = None
    raw_height: Optional[str] = None
    raw_college: Optional[str] = None
    raw_country: Optional[str] = None
    raw_draft_year: Optional[str] = None
    raw_draft_round: Optional[str] = None
    raw_draft_number: Optional[str] = None
    raw_season: Optional[str] = None
    raw_gp: Optional[str] = None
    raw_pts: Optional[str] = None
    raw_reb: Optional[str] = None
    raw_ast: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Optional[str]],
        mapping: Mapping[str, str],
        *,
        line: Optional[int] = None,
    ) -> "SeasonRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key, DEFAULT_SEASON_MAPPING[key])
            value = row.get(column)
            if value is None:
                return None
            value = value.strip()
            return value or None

        data = {f"raw_{key}": extract(key) for key in DEFAULT_SEASON_MAPPING}
        return cls(**data, line=line)

    def value(self, key: str) -> Optional[str]:
        return getattr(self, f"raw_{key}")


@dataclass
class IngestReport:
    total_rows: int = 0
    loaded_rows: int = 0
    rejected_rows: List[str] = field(default_factory=list)
    skipped_other_seasons: int = 0


def _parse_int(raw: str, key: str, *, line: Optional[int]) -> int:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        raise MalformedFactError(f"{key} '{raw}' is not an integer", line=line) from None
    if not value.is_integer():
        raise MalformedFactError(f"{key} '{raw}' is not an integer", line=line)
    return int(value)


def _parse_float(raw: str, key: str, *, line: Optional[int]) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise MalformedFactError(f"{key} '{raw}' is not numeric", line=line) from None
    if not math.isfinite(value):
        raise MalformedFactError(f"{key} '{raw}' is not a finite number", line=line)
    return value


def row_to_fact(row: SeasonRow) -> PlayerSeasonFact:
    """Validate a raw row, raising MalformedFactError rather than coercing gaps."""

    missing = [key for key in _REQUIRED_FIELDS if row.value(key) is None]
    if missing:
        raise MalformedFactError(f"missing required field(s): {', '.join(missing)}", line=row.line)

    data: dict[str, object] = {
        "player_name": row.value("player_name"),
        "season": _parse_int(row.value("season"), "season", line=row.line),
        "gp": _parse_int(row.value("gp"), "gp", line=row.line),
        "pts": _parse_float(row.value("pts"), "pts", line=row.line),
        "reb": _parse_float(row.value("reb"), "reb", line=row.line),
        "ast": _parse_float(row.value("ast"), "ast", line=row.line),
    }
    for key in ATTRIBUTE_FIELDS:
        data[key] = row.value(key)
    try:
        return PlayerSeasonFact(**data)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise MalformedFactError(errors, line=row.line) from exc


def load_season_rows(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[SeasonRow]:
    mapping = mapping or DEFAULT_SEASON_MAPPING
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        # Header is line 1.
        rows = [
            SeasonRow.from_mapping(row, mapping, line=index)
            for index, row in enumerate(reader, start=2)
        ]
    return rows


def rows_to_facts(
    rows: Sequence[SeasonRow],
    *,
    season: Optional[int] = None,
    skip_malformed: bool = False,
) -> Tuple[List[PlayerSeasonFact], IngestReport]:
    facts: List[PlayerSeasonFact] = []
    report = IngestReport(total_rows=len(rows))
    for row in rows:
        try:
            fact = row_to_fact(row)
        except MalformedFactError as exc:
            if not skip_malformed:
                raise
            logger.warning("Rejected malformed season row: %s", exc)
            report.rejected_rows.append(str(exc))
            continue
        if season is not None and fact.season != season:
            report.skipped_other_seasons += 1
            continue
        facts.append(fact)
    report.loaded_rows = len(facts)
    return facts, report


def load_season_facts(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
    season: Optional[int] = None,
    skip_malformed: bool = False,
) -> Tuple[List[PlayerSeasonFact], IngestReport]:
    rows = load_season_rows(path, mapping=mapping)
    facts, report = rows_to_facts(rows, season=season, skip_malformed=skip_malformed)
    logger.info(
        "Loaded %d/%d season rows from %s (%d rejected)",
        report.loaded_rows,
        report.total_rows,
        path,
        len(report.rejected_rows),
    )
    return facts, report

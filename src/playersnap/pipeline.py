"""Season-by-season orchestration over the snapshot store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from playersnap.cumulate import MergeSummary, merge_snapshots_with_summary
from playersnap.errors import SeasonMismatchError
from playersnap.persistence import SnapshotStore


logger = logging.getLogger(__name__)


@dataclass
class SeasonRunResult:
    season: int
    summary: MergeSummary
    rows_written: int


def _check_lineage(store: SnapshotStore, season: int) -> None:
    """Refuse to start ``season`` when the lineage has a gap right before it."""

    previous = season - 1
    seasons = store.snapshot_seasons()
    earlier = [s for s in seasons if s < previous]
    if earlier and previous not in seasons:
        raise SeasonMismatchError(
            f"No snapshot for season {previous} but one exists for {earlier[-1]}; "
            f"build seasons {earlier[-1] + 1} through {previous} first"
        )


def run_season(store: SnapshotStore, season: int) -> SeasonRunResult:
    """Build the snapshot as of ``season`` from ``season - 1`` and that season's facts."""

    yesterday = store.load_snapshots(season - 1)
    if not yesterday:
        _check_lineage(store, season)
    today = store.load_facts(season)
    if not yesterday and not today:
        logger.warning("No snapshot for %d and no facts for %d; writing an empty season", season - 1, season)

    merged, summary = merge_snapshots_with_summary(yesterday, today)
    # An empty merge has no season of its own.
    summary.season = season
    rows_written = store.replace_snapshots(season, merged)
    logger.info(
        "Season %d: %d new, %d continuing, %d inactive",
        season,
        summary.new_players,
        summary.continuing_players,
        summary.inactive_players,
    )
    return SeasonRunResult(season=season, summary=summary, rows_written=rows_written)


def backfill(store: SnapshotStore, start: int, end: int) -> List[SeasonRunResult]:
    """Run every season from ``start`` through ``end`` in order.

    Stops at the first failure; seasons already written stay written.
    """

    if end < start:
        raise ValueError(f"end season {end} is before start season {start}")
    _check_lineage(store, start)
    results: List[SeasonRunResult] = []
    for season in range(start, end + 1):
        results.append(run_season(store, season))
    return results

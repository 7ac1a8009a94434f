"""Read-side helpers over a snapshot's season history."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Dict, Iterable, List, Sequence, Tuple

from playersnap.errors import EmptySequenceError
from playersnap.models import PlayerSnapshot, SeasonStats


HISTORY_COLUMNS: Tuple[str, ...] = ("player_name", "season", "gp", "pts", "reb", "ast")


def expand_history(snapshot: PlayerSnapshot) -> List[Tuple[str, SeasonStats]]:
    """Return one ``(player_name, stats)`` pair per season, oldest first."""

    return [(snapshot.player_name, stats) for stats in snapshot.season_stats]


def history_rows(snapshots: Iterable[PlayerSnapshot]) -> List[Dict[str, object]]:
    """Flatten snapshots into one plain row per player season."""

    rows: List[Dict[str, object]] = []
    for snapshot in snapshots:
        for player_name, stats in expand_history(snapshot):
            rows.append({"player_name": player_name, **stats.model_dump()})
    return rows


def growth_ratio(snapshot: PlayerSnapshot) -> float:
    """Latest season's points over the first recorded season's points.

    When the first season's points are exactly zero the divisor becomes 1, so
    the result is just the latest points. "First" is the first season this
    snapshot lineage recorded, which is only the player's debut if the
    lineage started at or before it.
    """

    if not snapshot.season_stats:
        raise EmptySequenceError(f"Player {snapshot.player_name!r} has no season history")
    first = snapshot.season_stats[0]
    last = snapshot.season_stats[-1]
    divisor = first.pts if first.pts != 0 else 1
    return last.pts / divisor


def growth_ratios(snapshots: Iterable[PlayerSnapshot]) -> Dict[str, float]:
    return {snapshot.player_name: growth_ratio(snapshot) for snapshot in snapshots}


def export_history_to_csv(snapshots: Sequence[PlayerSnapshot]) -> str:
    """Render flattened season history as CSV text."""

    buffer = StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(HISTORY_COLUMNS))
    writer.writeheader()
    for row in history_rows(snapshots):
        writer.writerow(row)
    return buffer.getvalue()


__all__ = [
    "HISTORY_COLUMNS",
    "expand_history",
    "export_history_to_csv",
    "growth_ratio",
    "growth_ratios",
    "history_rows",
]

"""Persistence layer for season facts and cumulative player snapshots."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from playersnap.errors import SeasonMismatchError
from playersnap.models import (
    ATTRIBUTE_FIELDS,
    PlayerSeasonFact,
    PlayerSnapshot,
    ScoringClass,
    SeasonStats,
)


logger = logging.getLogger(__name__)

_ATTRIBUTE_COLUMNS = ", ".join(ATTRIBUTE_FIELDS)
_SCORING_VALUES = ", ".join(f"'{member.value}'" for member in ScoringClass)


class SnapshotStore:
    """Simple SQLite-backed store for season facts and player snapshots."""

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        # Commits on success, rolls back on error, always closes.
        with closing(self._connect()) as conn:
            with conn:
                yield conn

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_seasons (
                player_name TEXT NOT NULL,
                height TEXT,
                college TEXT,
                country TEXT,
                draft_year TEXT,
                draft_round TEXT,
                draft_number TEXT,
                season INTEGER NOT NULL,
                gp INTEGER NOT NULL,
                pts REAL NOT NULL,
                reb REAL NOT NULL,
                ast REAL NOT NULL,
                PRIMARY KEY (player_name, season)
            )
            """
        )
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS players (
                player_name TEXT NOT NULL,
                height TEXT,
                college TEXT,
                country TEXT,
                draft_year TEXT,
                draft_round TEXT,
                draft_number TEXT,
                season_stats_json TEXT NOT NULL,
                scoring_class TEXT NOT NULL CHECK (scoring_class IN ({_SCORING_VALUES})),
                years_since_last_season INTEGER NOT NULL,
                current_season INTEGER NOT NULL,
                PRIMARY KEY (player_name, current_season)
            )
            """
        )

    def save_facts(self, facts: Iterable[PlayerSeasonFact]) -> int:
        """Upsert fact rows, returning how many were written."""

        payload = [
            (
                fact.player_name,
                *(getattr(fact, name) for name in ATTRIBUTE_FIELDS),
                fact.season,
                fact.gp,
                fact.pts,
                fact.reb,
                fact.ast,
            )
            for fact in facts
        ]
        with self._connection() as conn:
            conn.executemany(
                f"""
                INSERT OR REPLACE INTO player_seasons (
                    player_name, {_ATTRIBUTE_COLUMNS}, season, gp, pts, reb, ast
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                payload,
            )
        logger.info("Saved %d season fact rows", len(payload))
        return len(payload)

    def load_facts(self, season: int) -> List[PlayerSeasonFact]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM player_seasons WHERE season = ? ORDER BY player_name",
                (season,),
            ).fetchall()
        return [self._row_to_fact(row) for row in rows]

    def fact_seasons(self) -> List[int]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT DISTINCT season FROM player_seasons ORDER BY season"
            ).fetchall()
        return [row["season"] for row in rows]

    def load_snapshots(self, season: int) -> List[PlayerSnapshot]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM players WHERE current_season = ? ORDER BY player_name",
                (season,),
            ).fetchall()
        return [self._row_to_snapshot(row) for row in rows]

    def get_snapshot(self, player_name: str, season: int) -> Optional[PlayerSnapshot]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM players WHERE player_name = ? AND current_season = ?",
                (player_name, season),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_snapshot(row)

    def snapshot_seasons(self) -> List[int]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT DISTINCT current_season FROM players ORDER BY current_season"
            ).fetchall()
        return [row["current_season"] for row in rows]

    def latest_snapshot_season(self) -> Optional[int]:
        with self._connection() as conn:
            row = conn.execute("SELECT MAX(current_season) AS season FROM players").fetchone()
        return row["season"] if row is not None else None

    def replace_snapshots(self, season: int, snapshots: Iterable[PlayerSnapshot]) -> int:
        """Swap in the full snapshot for ``season`` inside one transaction."""

        snapshots = list(snapshots)
        stray = sorted({s.current_season for s in snapshots if s.current_season != season})
        if stray:
            raise SeasonMismatchError(
                f"Snapshots for season {season} include rows as of {stray}"
            )
        payload = [
            (
                snapshot.player_name,
                *(getattr(snapshot, name) for name in ATTRIBUTE_FIELDS),
                json.dumps([stats.model_dump() for stats in snapshot.season_stats]),
                snapshot.scoring_class.value,
                snapshot.years_since_last_season,
                snapshot.current_season,
            )
            for snapshot in snapshots
        ]
        # The connection context manager rolls back on error, so a failed insert
        # leaves the previous rows for this season in place.
        with self._connection() as conn:
            conn.execute("DELETE FROM players WHERE current_season = ?", (season,))
            conn.executemany(
                f"""
                INSERT INTO players (
                    player_name, {_ATTRIBUTE_COLUMNS}, season_stats_json, scoring_class,
                    years_since_last_season, current_season
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                payload,
            )
        logger.info("Wrote %d snapshot rows for season %d", len(payload), season)
        return len(payload)

    def _row_to_fact(self, row: sqlite3.Row) -> PlayerSeasonFact:
        return PlayerSeasonFact(
            player_name=row["player_name"],
            **{name: row[name] for name in ATTRIBUTE_FIELDS},
            season=row["season"],
            gp=row["gp"],
            pts=row["pts"],
            reb=row["reb"],
            ast=row["ast"],
        )

    def _row_to_snapshot(self, row: sqlite3.Row) -> PlayerSnapshot:
        stats = json.loads(row["season_stats_json"] or "[]")
        return PlayerSnapshot(
            player_name=row["player_name"],
            **{name: row[name] for name in ATTRIBUTE_FIELDS},
            season_stats=tuple(SeasonStats(**item) for item in stats),
            scoring_class=ScoringClass(row["scoring_class"]),
            years_since_last_season=row["years_since_last_season"],
            current_season=row["current_season"],
        )


__all__ = ["SnapshotStore"]

from pathlib import Path

import pytest

from playersnap.errors import DuplicateKeyError, SeasonMismatchError
from playersnap.models import PlayerSeasonFact, ScoringClass
from playersnap.persistence import SnapshotStore
from playersnap.pipeline import backfill, run_season


def _fact(name: str, season: int, pts: float) -> PlayerSeasonFact:
    return PlayerSeasonFact(player_name=name, season=season, gp=70, pts=pts, reb=5.0, ast=3.0)


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    store = SnapshotStore(tmp_path / "playersnap.sqlite")
    store.save_facts(
        [
            _fact("A", 1996, 25.0),
            _fact("B", 1996, 8.0),
            _fact("A", 1997, 18.0),
            _fact("C", 1997, 11.0),
            _fact("B", 1999, 16.0),
        ]
    )
    return store


def test_run_season_from_empty_snapshot(store: SnapshotStore):
    result = run_season(store, 1996)

    assert result.rows_written == 2
    assert result.summary.new_players == 2
    snapshot = store.get_snapshot("A", 1996)
    assert snapshot.scoring_class is ScoringClass.STAR


def test_backfill_builds_each_season(store: SnapshotStore):
    results = backfill(store, 1996, 1999)

    assert [r.season for r in results] == [1996, 1997, 1998, 1999]
    assert [r.rows_written for r in results] == [2, 3, 3, 3]

    b_1998 = store.get_snapshot("B", 1998)
    assert b_1998.years_since_last_season == 2
    assert b_1998.scoring_class is ScoringClass.BAD
    assert len(b_1998.season_stats) == 1

    b_1999 = store.get_snapshot("B", 1999)
    assert b_1999.years_since_last_season == 0
    assert b_1999.scoring_class is ScoringClass.GOOD
    assert [s.season for s in b_1999.season_stats] == [1996, 1999]

    a_1999 = store.get_snapshot("A", 1999)
    assert a_1999.years_since_last_season == 2
    assert a_1999.scoring_class is ScoringClass.GOOD
    assert [s.season for s in a_1999.season_stats] == [1996, 1997]


def test_run_season_with_nothing_writes_empty_season(store: SnapshotStore):
    result = run_season(store, 1990)

    assert result.rows_written == 0
    assert result.summary.season == 1990


def test_backfill_rejects_reversed_range(store: SnapshotStore):
    with pytest.raises(ValueError):
        backfill(store, 1999, 1996)


def test_failed_season_keeps_previous_snapshot(store: SnapshotStore, monkeypatch):
    run_season(store, 1996)
    run_season(store, 1997)
    before = store.load_snapshots(1997)
    assert len(before) == 3
    original_load = store.load_facts

    def duplicated(season: int):
        facts = original_load(season)
        return facts + facts[:1]

    monkeypatch.setattr(store, "load_facts", duplicated)
    with pytest.raises(DuplicateKeyError):
        run_season(store, 1997)

    assert store.load_snapshots(1997) == before


def test_run_season_refuses_gap_in_lineage(tmp_path: Path):
    store = SnapshotStore(tmp_path / "gap.sqlite")
    store.save_facts([_fact("A", 2000, 20.0), _fact("B", 2000, 12.0), _fact("A", 2002, 22.0)])
    run_season(store, 2000)

    with pytest.raises(SeasonMismatchError) as excinfo:
        run_season(store, 2002)

    assert "2001" in str(excinfo.value)
    assert store.load_snapshots(2002) == []

    run_season(store, 2001)
    run_season(store, 2002)
    a_2002 = store.get_snapshot("A", 2002)
    assert [s.season for s in a_2002.season_stats] == [2000, 2002]
    assert store.get_snapshot("B", 2002).years_since_last_season == 2


def test_backfill_refuses_gap_before_start(tmp_path: Path):
    store = SnapshotStore(tmp_path / "gap.sqlite")
    store.save_facts([_fact("A", 2000, 20.0)])
    run_season(store, 2000)

    with pytest.raises(SeasonMismatchError):
        backfill(store, 2002, 2003)
    assert store.snapshot_seasons() == [2000]

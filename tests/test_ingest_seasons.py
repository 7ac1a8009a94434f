from pathlib import Path

import pytest

from playersnap.errors import MalformedFactError
from playersnap.ingest import SeasonRow, load_season_facts, row_to_fact, rows_to_facts


_HEADER = "player_name,height,college,country,draft_year,draft_round,draft_number,season,gp,pts,reb,ast\n"


def _write(tmp_path: Path, body: str, header: str = _HEADER) -> Path:
    path = tmp_path / "player_seasons.csv"
    path.write_text(header + body, encoding="utf-8")
    return path


def test_load_season_facts_parses_rows(tmp_path: Path):
    path = _write(
        tmp_path,
        "Allen Iverson,6-0,Georgetown,USA,1996,1,1,2001,71,31.1,3.8,4.6\n"
        "Shaquille O'Neal,7-1,LSU,USA,1992,1,1,2001,74,28.7,12.7,3.7\n",
    )

    facts, report = load_season_facts(path)

    assert report.total_rows == 2
    assert report.loaded_rows == 2
    assert report.rejected_rows == []
    assert facts[0].player_name == "Allen Iverson"
    assert facts[0].season == 2001
    assert facts[0].gp == 71
    assert facts[1].pts == pytest.approx(28.7)


def test_blank_attributes_become_none(tmp_path: Path):
    path = _write(tmp_path, "Rookie,,  ,USA,Undrafted,Undrafted,Undrafted,2001,10,2.0,1.0,0.5\n")

    facts, _ = load_season_facts(path)

    assert facts[0].height is None
    assert facts[0].college is None
    assert facts[0].draft_year == "Undrafted"


def test_missing_points_raises_with_line(tmp_path: Path):
    path = _write(
        tmp_path,
        "Good Row,6-0,,USA,1996,1,1,2001,71,31.1,3.8,4.6\n"
        "Bad Row,6-0,,USA,1996,1,1,2001,71,,3.8,4.6\n",
    )

    with pytest.raises(MalformedFactError) as excinfo:
        load_season_facts(path)

    assert excinfo.value.line == 3
    assert "pts" in str(excinfo.value)


def test_skip_malformed_collects_rejections(tmp_path: Path):
    path = _write(
        tmp_path,
        "Good Row,6-0,,USA,1996,1,1,2001,71,31.1,3.8,4.6\n"
        "No Season,6-0,,USA,1996,1,1,,71,20.0,3.8,4.6\n"
        "Bad Games,6-0,,USA,1996,1,1,2001,many,20.0,3.8,4.6\n",
    )

    facts, report = load_season_facts(path, skip_malformed=True)

    assert [fact.player_name for fact in facts] == ["Good Row"]
    assert report.total_rows == 3
    assert len(report.rejected_rows) == 2
    assert report.rejected_rows[0].startswith("line 3:")


def test_season_filter_skips_other_seasons(tmp_path: Path):
    path = _write(
        tmp_path,
        "A,6-0,,USA,1996,1,1,2000,70,20.0,3.0,4.0\n"
        "A,6-0,,USA,1996,1,1,2001,71,21.0,3.0,4.0\n",
    )

    facts, report = load_season_facts(path, season=2001)

    assert [fact.season for fact in facts] == [2001]
    assert report.skipped_other_seasons == 1


def test_custom_mapping(tmp_path: Path):
    path = _write(
        tmp_path,
        "A,2001,70,20.5,3.0,4.0\n",
        header="name,year,games,points,rebounds,assists\n",
    )
    mapping = {
        "player_name": "name",
        "season": "year",
        "gp": "games",
        "pts": "points",
        "reb": "rebounds",
        "ast": "assists",
    }

    facts, _ = load_season_facts(path, mapping=mapping)

    assert facts[0].pts == pytest.approx(20.5)
    assert facts[0].country is None


def test_row_to_fact_accepts_integral_float_games():
    row = SeasonRow(raw_player_name="A", raw_season="2001", raw_gp="70.0", raw_pts="1", raw_reb="1", raw_ast="1")

    assert row_to_fact(row).gp == 70


def test_row_to_fact_rejects_negative_games():
    row = SeasonRow(raw_player_name="A", raw_season="2001", raw_gp="-1", raw_pts="1", raw_reb="1", raw_ast="1", line=7)

    with pytest.raises(MalformedFactError) as excinfo:
        row_to_fact(row)

    assert excinfo.value.line == 7
    assert "gp" in str(excinfo.value)


def test_row_to_fact_rejects_non_finite_points():
    row = SeasonRow(raw_player_name="A", raw_season="2001", raw_gp="1", raw_pts="nan", raw_reb="1", raw_ast="1")

    with pytest.raises(MalformedFactError):
        row_to_fact(row)


def test_rows_to_facts_raises_by_default():
    rows = [SeasonRow(raw_player_name="A", raw_season="2001")]

    with pytest.raises(MalformedFactError):
        rows_to_facts(rows)

"""Command-line interface for loading facts and building cumulative snapshots."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from playersnap.analysis import export_history_to_csv, growth_ratio
from playersnap.config import load_settings
from playersnap.config_loader import MappingProfile
from playersnap.errors import PlayerSnapError
from playersnap.ingest import load_season_facts
from playersnap.persistence import SnapshotStore
from playersnap.pipeline import SeasonRunResult, backfill, run_season


def _build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Maintain cumulative player season snapshots")
    parser.add_argument("--db", type=Path, default=settings.db_path, help="SQLite database path")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
        help="Logging verbosity",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    load = commands.add_parser("load-facts", help="Load a player seasons CSV into the store")
    load.add_argument("csv", type=Path, help="Path to player seasons CSV")
    load.add_argument("--season", type=int, default=None, help="Only keep rows for this season")
    load.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for CSV columns (e.g., pts=points)",
    )
    load.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    load.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    load.add_argument(
        "--skip-malformed",
        action="store_true",
        help="Reject malformed rows individually instead of aborting the load",
    )
    load.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write ingest summary JSON",
    )

    merge = commands.add_parser("merge", help="Build the snapshot for one season")
    merge.add_argument("season", type=int)

    fill = commands.add_parser("backfill", help="Build snapshots for a range of seasons")
    fill.add_argument("start", type=int)
    fill.add_argument("end", type=int)

    history = commands.add_parser("history", help="Print season history rows as CSV")
    history.add_argument("season", type=int, help="Snapshot season to read")
    history.add_argument("--player", default=None, help="Restrict to one player")
    history.add_argument("--output", type=Path, default=None, help="Write CSV here instead of stdout")

    growth = commands.add_parser("growth", help="Print latest/first points ratios")
    growth.add_argument("season", type=int, help="Snapshot season to read")
    growth.add_argument("--player", default=None, help="Restrict to one player")
    return parser


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _print_run(result: SeasonRunResult) -> None:
    summary = result.summary
    print(
        f"Season {result.season}: {result.rows_written} players "
        f"({summary.new_players} new, {summary.continuing_players} continuing, "
        f"{summary.inactive_players} inactive)"
    )


def _load_facts(args: argparse.Namespace, store: SnapshotStore) -> None:
    mapping = _parse_mapping(args.column)
    if args.load_profile:
        profile = MappingProfile.load(args.load_profile)
        mapping = profile.season_mapping | mapping

    facts, report = load_season_facts(
        args.csv,
        mapping=mapping or None,
        season=args.season,
        skip_malformed=args.skip_malformed,
    )
    store.save_facts(facts)
    print(f"Loaded {report.loaded_rows}/{report.total_rows} season rows from {args.csv}")

    if args.save_profile:
        MappingProfile(mapping).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}")
    if report.rejected_rows:
        preview = "; ".join(report.rejected_rows[:5])
        more = len(report.rejected_rows) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Rejected rows: {preview}{suffix}")
    if args.report:
        report_payload = {
            "total_rows": report.total_rows,
            "loaded_rows": report.loaded_rows,
            "rejected_rows": report.rejected_rows,
            "skipped_other_seasons": report.skipped_other_seasons,
        }
        args.report.write_text(json.dumps(report_payload, indent=2), encoding="utf-8")
        print(f"Wrote ingest report to {args.report}")


def _select_snapshots(store: SnapshotStore, season: int, player: Optional[str]):
    if player is None:
        return store.load_snapshots(season)
    snapshot = store.get_snapshot(player, season)
    if snapshot is None:
        raise SystemExit(f"No snapshot for {player!r} as of {season}")
    return [snapshot]


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = SnapshotStore(args.db)

    try:
        if args.command == "load-facts":
            _load_facts(args, store)
        elif args.command == "merge":
            _print_run(run_season(store, args.season))
        elif args.command == "backfill":
            for result in backfill(store, args.start, args.end):
                _print_run(result)
        elif args.command == "history":
            text = export_history_to_csv(_select_snapshots(store, args.season, args.player))
            if args.output:
                args.output.write_text(text, encoding="utf-8")
                print(f"Wrote season history to {args.output}")
            else:
                print(text, end="")
        elif args.command == "growth":
            for snapshot in _select_snapshots(store, args.season, args.player):
                print(f"{snapshot.player_name}\t{growth_ratio(snapshot):.4f}")
    except (PlayerSnapError, ValueError) as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()

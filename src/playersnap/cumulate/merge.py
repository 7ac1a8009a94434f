"""Merge a season of facts into the prior season's cumulative snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from playersnap.config import iter_tiers
from playersnap.errors import DuplicateKeyError, SeasonMismatchError
from playersnap.models import (
    ATTRIBUTE_FIELDS,
    PlayerSeasonFact,
    PlayerSnapshot,
    ScoringClass,
)


logger = logging.getLogger(__name__)

_T = TypeVar("_T")


@dataclass
class MergeSummary:
    season: Optional[int]
    new_players: int = 0
    continuing_players: int = 0
    inactive_players: int = 0

    @property
    def total_players(self) -> int:
        return self.new_players + self.continuing_players + self.inactive_players


def classify_scoring(points: float) -> ScoringClass:
    """Return the first scoring tier whose threshold ``points`` clears."""

    for tier in iter_tiers():
        if tier.matches(points):
            return tier.scoring_class
    raise RuntimeError("Scoring tiers have no catch-all entry")  # pragma: no cover


def _index_by_player(
    items: Iterable[_T],
    *,
    source: str,
    key: Callable[[_T], str],
) -> Dict[str, _T]:
    indexed: Dict[str, _T] = {}
    for item in items:
        name = key(item)
        if name in indexed:
            raise DuplicateKeyError(name, source)
        indexed[name] = item
    return indexed


def _single_season(seasons: Iterable[int], *, source: str) -> Optional[int]:
    distinct = sorted(set(seasons))
    if len(distinct) > 1:
        raise SeasonMismatchError(f"{source} spans multiple seasons: {distinct}")
    return distinct[0] if distinct else None


def _resolve_season(
    facts: Dict[str, PlayerSeasonFact],
    prior: Dict[str, PlayerSnapshot],
) -> Optional[int]:
    fact_season = _single_season((f.season for f in facts.values()), source="today's facts")
    prior_season = _single_season(
        (s.current_season for s in prior.values()), source="yesterday's snapshot"
    )
    if fact_season is not None and prior_season is not None and fact_season != prior_season + 1:
        raise SeasonMismatchError(
            f"Facts for season {fact_season} cannot follow a snapshot as of {prior_season}"
        )
    if fact_season is not None:
        return fact_season
    if prior_season is not None:
        return prior_season + 1
    return None


def _new_player(fact: PlayerSeasonFact) -> PlayerSnapshot:
    return PlayerSnapshot(
        player_name=fact.player_name,
        **{field: getattr(fact, field) for field in ATTRIBUTE_FIELDS},
        season_stats=(fact.to_season_stats(),),
        scoring_class=classify_scoring(fact.pts),
        years_since_last_season=0,
        current_season=fact.season,
    )


def _continuing_player(fact: PlayerSeasonFact, prior: PlayerSnapshot) -> PlayerSnapshot:
    attributes = {}
    for field in ATTRIBUTE_FIELDS:
        value = getattr(fact, field)
        attributes[field] = value if value is not None else getattr(prior, field)
    return PlayerSnapshot(
        player_name=fact.player_name,
        **attributes,
        season_stats=prior.season_stats + (fact.to_season_stats(),),
        scoring_class=classify_scoring(fact.pts),
        years_since_last_season=0,
        current_season=fact.season,
    )


def _inactive_player(prior: PlayerSnapshot) -> PlayerSnapshot:
    return prior.model_copy(
        update={
            "years_since_last_season": prior.years_since_last_season + 1,
            "current_season": prior.current_season + 1,
        }
    )


def merge_snapshots_with_summary(
    yesterday: Iterable[PlayerSnapshot],
    today: Iterable[PlayerSeasonFact],
) -> tuple[List[PlayerSnapshot], MergeSummary]:
    """Merge and also report how many players fell into each branch."""

    prior = _index_by_player(yesterday, source="yesterday's snapshot", key=lambda s: s.player_name)
    facts = _index_by_player(today, source="today's facts", key=lambda f: f.player_name)
    summary = MergeSummary(season=_resolve_season(facts, prior))

    merged: List[PlayerSnapshot] = []
    for name in sorted(facts.keys() | prior.keys()):
        fact = facts.get(name)
        snapshot = prior.get(name)
        if fact is not None and snapshot is None:
            merged.append(_new_player(fact))
            summary.new_players += 1
        elif fact is not None and snapshot is not None:
            merged.append(_continuing_player(fact, snapshot))
            summary.continuing_players += 1
        elif snapshot is not None:
            merged.append(_inactive_player(snapshot))
            summary.inactive_players += 1

    logger.debug(
        "Merged season %s: %d new, %d continuing, %d inactive",
        summary.season,
        summary.new_players,
        summary.continuing_players,
        summary.inactive_players,
    )
    return merged, summary


def merge_snapshots(
    yesterday: Iterable[PlayerSnapshot],
    today: Iterable[PlayerSeasonFact],
) -> List[PlayerSnapshot]:
    """Full outer join of yesterday's snapshot with today's facts on player name.

    Every player in either input yields exactly one snapshot as of the new
    season. Inputs are validated up front, so a rejected merge produces no
    output at all.
    """

    merged, _ = merge_snapshots_with_summary(yesterday, today)
    return merged

"""Named fallback strategies for qualification.

Two ordered chains live here, each tried first to last, first usable
result wins:

- GAMES_PLAYED_STRATEGIES: how many games the team has played
- VOLUME_STRATEGIES: a row's workload for each qualification metric

Every strategy is a plain function so it can be tested on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from statline.core.enums import QualificationMetric
from statline.core.values import number_or_none, parse_innings
from statline.datasets.models import Dataset
from statline.datasets.registry import DatasetDefinition, TeamDefinition

# "○6-5", "●2-3", "△3 - 3": anything carrying <int>-<int> is a played game.
SCORE_RE = re.compile(r"\d+\s*-\s*\d+")

GAME_LOG = "game_log"
STANDINGS = "standings"


@dataclass(frozen=True)
class GamesPlayedStrategy:
    """One way of counting team games.

    Attributes:
        name: Identifier used in logs.
        source: Which qualification source it reads (``game_log`` or ``standings``).
        count: ``(dataset, definition, team) -> games or None``.
    """

    name: str
    source: str
    count: Callable[[Dataset, DatasetDefinition, TeamDefinition], Optional[float]]


@dataclass(frozen=True)
class VolumeStrategy:
    name: str
    estimate: Callable[[Mapping[str, str], DatasetDefinition], Optional[float]]


def is_played_game(row: Mapping[str, str], definition: DatasetDefinition) -> bool:
    """A game-log row counts when it has an opponent and a ``<int>-<int>`` score.

    Scheduled fixtures carry only a date, so they never count.
    """
    opponent = str(definition.value(row, "opponent") or "").strip()
    score = str(definition.value(row, "score") or "").strip()
    if not opponent or not score:
        return False
    return SCORE_RE.search(score) is not None


def count_played_games(
    dataset: Dataset, definition: DatasetDefinition, team: TeamDefinition
) -> Optional[float]:
    return float(sum(1 for row in dataset.rows if is_played_game(row, definition)))


def find_team_row(
    dataset: Dataset, definition: DatasetDefinition, team: TeamDefinition
) -> Optional[Mapping[str, str]]:
    for row in dataset.rows:
        if team.matches(definition.value(row, "team")):
            return row
    return None


def standings_games_column(
    dataset: Dataset, definition: DatasetDefinition, team: TeamDefinition
) -> Optional[float]:
    row = find_team_row(dataset, definition, team)
    if row is None:
        return None
    return number_or_none(definition.value(row, "games"))


def standings_record_sum(
    dataset: Dataset, definition: DatasetDefinition, team: TeamDefinition
) -> Optional[float]:
    row = find_team_row(dataset, definition, team)
    if row is None:
        return None
    parts = [number_or_none(definition.value(row, k)) for k in ("wins", "losses", "draws")]
    if any(p is None for p in parts):
        return None
    return sum(parts)


GAMES_PLAYED_STRATEGIES: Tuple[GamesPlayedStrategy, ...] = (
    GamesPlayedStrategy("played_games_count", GAME_LOG, count_played_games),
    GamesPlayedStrategy("standings_games_column", STANDINGS, standings_games_column),
    GamesPlayedStrategy("standings_record_sum", STANDINGS, standings_record_sum),
)


def explicit_plate_appearances(
    row: Mapping[str, str], definition: DatasetDefinition
) -> Optional[float]:
    return number_or_none(definition.value(row, "plate_appearances"))


def explicit_at_bats(row: Mapping[str, str], definition: DatasetDefinition) -> Optional[float]:
    return number_or_none(definition.value(row, "at_bats"))


def hits_over_average(
    row: Mapping[str, str], definition: DatasetDefinition
) -> Optional[float]:
    """Approximate at-bats as hits / batting average."""
    hits = number_or_none(definition.value(row, "hits"))
    average = number_or_none(definition.value(row, "average"))
    if hits is None or average is None or average <= 0:
        return None
    return hits / average


def innings_pitched(row: Mapping[str, str], definition: DatasetDefinition) -> Optional[float]:
    return parse_innings(definition.value(row, "innings"))


VOLUME_STRATEGIES: Dict[QualificationMetric, Tuple[VolumeStrategy, ...]] = {
    QualificationMetric.PLATE_APPEARANCES: (
        VolumeStrategy("explicit_plate_appearances", explicit_plate_appearances),
        VolumeStrategy("explicit_at_bats", explicit_at_bats),
        VolumeStrategy("hits_over_average", hits_over_average),
    ),
    QualificationMetric.INNINGS: (VolumeStrategy("innings_pitched", innings_pitched),),
}


__all__ = [
    "SCORE_RE",
    "GAME_LOG",
    "STANDINGS",
    "GamesPlayedStrategy",
    "VolumeStrategy",
    "is_played_game",
    "count_played_games",
    "find_team_row",
    "standings_games_column",
    "standings_record_sum",
    "GAMES_PLAYED_STRATEGIES",
    "explicit_plate_appearances",
    "explicit_at_bats",
    "hits_over_average",
    "innings_pitched",
    "VOLUME_STRATEGIES",
]

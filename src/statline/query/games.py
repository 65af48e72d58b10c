"""Game-log summaries: the last few results and the coming week's fixtures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Mapping, Optional

from statline.datasets.models import Dataset

RECENT_LIMIT = 7
UPCOMING_DAYS = 7

# 2025-04-01, 2025/4/1, 2025年4月1日
_DATE_RE = re.compile(r"(\d{4})\s*[-/.年]\s*(\d{1,2})\s*[-/.月]\s*(\d{1,2})")


@dataclass(frozen=True)
class GameEntry:
    played_on: date
    row: Mapping[str, str]


def parse_game_date(value: Optional[str]) -> Optional[date]:
    m = _DATE_RE.search(str(value or ""))
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def _dated_entries(dataset: Dataset) -> List[GameEntry]:
    definition = dataset.describe()
    out: List[GameEntry] = []
    for row in dataset.rows:
        d = parse_game_date(definition.value(row, "date"))
        if d is not None:
            out.append(GameEntry(d, row))
    return out


def _has(row: Mapping[str, str], dataset: Dataset, symbol: str) -> bool:
    return bool(str(dataset.describe().value(row, symbol) or "").strip())


def recent_games(dataset: Dataset, limit: int = RECENT_LIMIT) -> List[GameEntry]:
    """Most recent played games (opponent or score filled in), newest first."""
    played = [
        e
        for e in _dated_entries(dataset)
        if _has(e.row, dataset, "opponent") or _has(e.row, dataset, "score")
    ]
    played.sort(key=lambda e: e.played_on)
    return list(reversed(played[-limit:])) if limit > 0 else []


def upcoming_games(
    dataset: Dataset, today: date, days: int = UPCOMING_DAYS
) -> List[GameEntry]:
    """Scheduled dates (no opponent, no score yet) in ``[today, today + days)``, oldest first."""
    end = today + timedelta(days=days)
    upcoming = [
        e
        for e in _dated_entries(dataset)
        if not _has(e.row, dataset, "opponent")
        and not _has(e.row, dataset, "score")
        and today <= e.played_on < end
    ]
    upcoming.sort(key=lambda e: e.played_on)
    return upcoming

"""Shared pytest configuration, fixtures, and sample snapshots.

Tests never hardcode header text: ``col(dataset_id, symbol)`` resolves a
symbolic column name through the packaged dataset registry.
"""

import asyncio
from collections import Counter
from typing import Dict, Iterable, Optional, Sequence

import pytest

from statline.datasets import (
    DatasetDefinition,
    DatasetLoadError,
    DatasetRegistry,
    DatasetStore,
    build_dataset,
)

REGISTRY = DatasetRegistry.default()


def col(dataset_id: str, symbol: str) -> str:
    """Literal header for a symbolic column name."""
    return REGISTRY.get(dataset_id).headers(symbol)[0]


def _quote(value: str) -> str:
    if any(ch in value for ch in ',"\n'):
        return '"' + value.replace('"', '""') + '"'
    return value


def csv_text(dataset_id: str, symbols: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Build a snapshot whose header uses the registry's literal column names."""
    lines = [",".join(col(dataset_id, s) for s in symbols)]
    lines.extend(",".join(_quote(v) for v in row) for row in rows)
    return "\n".join(lines) + "\n"


GAMES_SYMBOLS = ["date", "weekday", "opponent", "score", "starter"]
GAMES_ROWS = [
    ("2025-04-01", "火", "阪神タイガース", "○6-5", "戸郷"),
    ("2025-04-02", "水", "中日ドラゴンズ", "●2-3", "菅野"),
    ("2025-04-03", "木", "Lions", "△3-3", "山崎"),
    ("2025-04-04", "金", "阪神 タイガース", "○4-1", "グリフィン"),
    ("2025-04-05", "土", "", "", ""),
]
GAMES_CSV = csv_text("games", GAMES_SYMBOLS, GAMES_ROWS)

STANDINGS_SYMBOLS = ["team", "games", "wins", "losses", "draws"]
STANDINGS_ROWS = [
    ("阪神タイガース", "10", "6", "4", "0"),
    ("読売ジャイアンツ", "130", "70", "55", "5"),
]
STANDINGS_CSV = csv_text("standings", STANDINGS_SYMBOLS, STANDINGS_ROWS)

BATTERS_SYMBOLS = ["player", "average", "home_runs", "hits", "plate_appearances", "at_bats"]
BATTERS_ROWS = [
    ("岡本", "0.310", "30", "140", "500", "450"),
    ("坂本", "0.280", "10", "100", "", "402"),
    ("丸", "0.250", "15", "100", "", ""),
    ("門脇", "", "0", "", "", ""),
    ("吉川", "0.295", "5", "120", "403", "380"),
]
BATTERS_CSV = csv_text("batters", BATTERS_SYMBOLS, BATTERS_ROWS)

PITCHERS_SYMBOLS = ["player", "era", "wins", "innings", "strikeouts"]
PITCHERS_ROWS = [
    ("戸郷", "2.45", "12", "150.1", "140"),
    ("菅野", "3.10", "8", "130", "100"),
    ("山崎", "2.10", "9", "129.2", "90"),
    ("グリフィン", "", "0", "", ""),
    ("井上", "4.50", "3", "6.5", "5"),
]
PITCHERS_CSV = csv_text("pitchers", PITCHERS_SYMBOLS, PITCHERS_ROWS)

ALL_TEXTS = {
    "games": GAMES_CSV,
    "standings": STANDINGS_CSV,
    "batters": BATTERS_CSV,
    "pitchers": PITCHERS_CSV,
}


class FakeTextSource:
    """In-memory text source that counts fetches per dataset id."""

    def __init__(
        self,
        texts: Dict[str, str],
        failures: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ) -> None:
        self.texts = dict(texts)
        self.failures = dict(failures or {})
        self.delay = delay
        self.calls: Counter = Counter()

    async def fetch_text(self, definition: DatasetDefinition) -> str:
        self.calls[definition.dataset_id] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if definition.dataset_id in self.failures:
            raise DatasetLoadError(definition.dataset_id, self.failures[definition.dataset_id])
        if definition.dataset_id not in self.texts:
            raise DatasetLoadError(definition.dataset_id, "not found")
        return self.texts[definition.dataset_id]


def make_dataset(dataset_id: str, text: Optional[str] = None):
    return build_dataset(REGISTRY.get(dataset_id), ALL_TEXTS[dataset_id] if text is None else text)


def rows_of(rows, dataset_id: str, symbol: str):
    """Project rows onto one symbolic column."""
    column = col(dataset_id, symbol)
    return [r[column] for r in rows]


@pytest.fixture
def registry():
    return REGISTRY


@pytest.fixture
def games():
    return make_dataset("games")


@pytest.fixture
def standings():
    return make_dataset("standings")


@pytest.fixture
def batters():
    return make_dataset("batters")


@pytest.fixture
def pitchers():
    return make_dataset("pitchers")


@pytest.fixture
def source():
    return FakeTextSource(ALL_TEXTS)


@pytest.fixture
def store(source):
    return DatasetStore(REGISTRY, source)

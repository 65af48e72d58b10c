"""Type-aware, stable row sorting.

Numbers compare by value, text by the current locale's collation, and
empty cells always sink to the bottom whichever way the column is sorted.
A number against text (a column with stray formatting) falls back to
comparing the raw strings.
"""

from __future__ import annotations

import locale
import unicodedata
from dataclasses import replace
from functools import cmp_to_key
from typing import List, Mapping, Optional, Sequence, Tuple

from statline.core.enums import ColumnRole, SortDirection
from statline.core.values import ComparableValue, classify
from statline.datasets.models import Dataset
from .state import QueryState


def collation_key(text: str) -> Tuple[str, str]:
    """Locale sort key; width and case differences only break ties."""
    text = text.replace("\n", " ")
    folded = unicodedata.normalize("NFKC", text).casefold()
    return locale.strxfrm(folded), locale.strxfrm(text)


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_values(a: ComparableValue, b: ComparableValue, direction: SortDirection) -> int:
    if a.is_empty or b.is_empty:
        return _cmp(a.is_empty, b.is_empty)
    sign = -1 if direction is SortDirection.DESC else 1
    if a.is_numeric and b.is_numeric:
        return sign * _cmp(a.number, b.number)
    return sign * _cmp(collation_key(a.text), collation_key(b.text))


def sort_rows(
    rows: Sequence[Mapping[str, str]],
    column: str,
    direction: SortDirection = SortDirection.ASC,
    role: Optional[ColumnRole] = None,
) -> List[Mapping[str, str]]:
    """Stable sort of ``rows`` by ``column``; rows with equal keys keep their order."""
    decorated: List[Tuple[ComparableValue, Mapping[str, str]]] = [
        (classify(row.get(column), role), row) for row in rows
    ]
    decorated.sort(key=cmp_to_key(lambda x, y: compare_values(x[0], y[0], direction)))
    return [row for _, row in decorated]


def default_sort_direction(dataset: Dataset, column: str) -> SortDirection:
    """Direction used when a column is first picked.

    "Lower is better" columns (ERA) go ascending, other numeric columns
    descending (leaders first), text columns ascending.
    """
    definition = dataset.describe()
    if definition.is_lower_better(column):
        return SortDirection.ASC
    if dataset.is_numeric(column):
        return SortDirection.DESC
    return SortDirection.ASC


def toggle_sort(state: QueryState, column: str, dataset: Dataset) -> QueryState:
    """Next state after the user picks ``column`` (e.g. clicks its header).

    Picking the current column flips its direction; a new column starts at
    its default direction.
    """
    if state.sort_column == column:
        return replace(state, sort_direction=state.sort_direction.flipped())
    return replace(
        state,
        sort_column=column,
        sort_direction=default_sort_direction(dataset, column),
    )

"""Query pipeline over a loaded dataset.

``query`` is a pure function of (dataset, thresholds, state). The steps run
in a fixed order:

1. structural hide: drop rows missing a required column (unplayed fixtures)
2. facet filter
3. qualification filter
4. free-text filter
5. type-aware stable sort
"""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from statline.datasets.models import Dataset
from statline.qualification.engine import is_qualified
from statline.qualification.models import QualificationThreshold
from .sorting import collation_key, sort_rows
from .state import QueryState

_WHITESPACE_RE = re.compile(r"\s+")

Row = Mapping[str, str]


def normalize_for_search(value: Optional[str]) -> str:
    """Collapse whitespace runs (newlines included) to one space, trim, casefold."""
    return _WHITESPACE_RE.sub(" ", str(value or "")).strip().casefold()


def normalize_facet(value: Optional[str]) -> str:
    """Facet values are compared with all whitespace removed."""
    return _WHITESPACE_RE.sub("", str(value or ""))


def hide_incomplete_rows(dataset: Dataset, rows: Iterable[Row]) -> List[Row]:
    definition = dataset.describe()
    required = definition.literal_headers(definition.required)
    if not required:
        return list(rows)
    present = [h for h in required if h in dataset.header]
    return [r for r in rows if all(str(r.get(h) or "").strip() for h in present)]


def filter_by_facet(dataset: Dataset, rows: Iterable[Row], facet_value: Optional[str]) -> List[Row]:
    definition = dataset.describe()
    wanted = normalize_facet(facet_value)
    if not wanted or not definition.facet:
        return list(rows)
    column = definition.header_for(definition.facet, dataset.header)
    if column is None:
        return list(rows)
    return [r for r in rows if normalize_facet(r.get(column)) == wanted]


def filter_qualified(
    dataset: Dataset, rows: Iterable[Row], thresholds: Optional[QualificationThreshold]
) -> List[Row]:
    definition = dataset.describe()
    if thresholds is None or not thresholds.is_active or definition.qualification is None:
        return list(rows)
    return [r for r in rows if is_qualified(r, definition, thresholds)]


def row_search_text(row: Row) -> str:
    return " ".join(normalize_for_search(v) for v in row.values())


def filter_by_text(rows: Iterable[Row], free_text: str) -> List[Row]:
    needle = normalize_for_search(free_text)
    if not needle:
        return list(rows)
    return [r for r in rows if needle in row_search_text(r)]


def query(
    dataset: Dataset,
    qualification: Optional[QualificationThreshold],
    state: QueryState,
) -> List[Row]:
    """Run the full pipeline and return the matching rows in display order.

    Args:
        dataset: A loaded dataset.
        qualification: Session thresholds; None or zero disables the
            qualified filter.
        state: Explicit UI state.

    Returns:
        The dataset's own row mappings, filtered and ordered. The dataset
        itself is not modified.

    Examples:
        >>> rows = query(ds, thresholds, QueryState(free_text="lion"))
        >>> rows = query(ds, thresholds, QueryState(sort_column="打率",
        ...                                         sort_direction=SortDirection.DESC))
    """
    rows: Sequence[Row] = hide_incomplete_rows(dataset, dataset.rows)
    rows = filter_by_facet(dataset, rows, state.facet_value)
    if state.qualified_only:
        rows = filter_qualified(dataset, rows, qualification)
    rows = filter_by_text(rows, state.free_text)
    if state.sort_column:
        role = dataset.describe().role_of(state.sort_column)
        rows = sort_rows(rows, state.sort_column, state.sort_direction, role)
    return list(rows)


def facet_options(dataset: Dataset) -> List[str]:
    """Distinct facet values (whitespace removed), collated, for the facet picker."""
    definition = dataset.describe()
    if not definition.facet:
        return []
    column = definition.header_for(definition.facet, dataset.header)
    if column is None:
        return []
    values = {normalize_facet(r.get(column)) for r in dataset.rows}
    values.discard("")
    return sorted(values, key=collation_key)


def sortable_columns(dataset: Dataset) -> List[str]:
    """Columns offered as sort keys.

    The recommended columns present in the header (the whole header when
    none are), minus name-like and facet columns, keeping numeric columns
    only.
    """
    definition = dataset.describe()
    candidates: List[str] = []
    for h in definition.literal_headers(definition.sort_candidates):
        if h in dataset.header and h not in candidates:
            candidates.append(h)
    if not candidates:
        candidates = list(dataset.header)
    excluded = set(definition.literal_headers(definition.sort_exclude))
    if definition.facet:
        excluded.update(definition.headers(definition.facet))
    return [c for c in candidates if c not in excluded and dataset.is_numeric(c)]

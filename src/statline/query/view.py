from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from statline.datasets.models import Dataset, LoadResult
from statline.qualification.models import QualificationThreshold
from .engine import query
from .state import QueryState


@dataclass(frozen=True)
class TableView:
    """What a renderer receives for one table.

    ``available=False`` is the "could not load" state: no rows, and
    ``reason`` carries the load failure.
    """

    dataset_id: str
    dataset_label: str
    header: Tuple[str, ...] = ()
    rows: Tuple[Mapping[str, str], ...] = field(default_factory=tuple)
    available: bool = True
    reason: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


def display_columns(dataset: Dataset) -> List[str]:
    """Configured display columns present in the snapshot, else the whole header."""
    definition = dataset.describe()
    cols = [
        h
        for h in (definition.header_for(s, dataset.header) for s in definition.display)
        if h is not None
    ]
    return cols or list(dataset.header)


def build_view(
    result: LoadResult,
    qualification: Optional[QualificationThreshold],
    state: QueryState,
    label: Optional[str] = None,
) -> TableView:
    """Turn a load outcome plus UI state into a renderable view."""
    if not result.ok or result.dataset is None:
        return TableView(
            dataset_id=result.dataset_id,
            dataset_label=label or result.dataset_id,
            available=False,
            reason=result.reason,
        )
    dataset = result.dataset
    rows = query(dataset, qualification, state)
    return TableView(
        dataset_id=dataset.dataset_id,
        dataset_label=label or dataset.label,
        header=tuple(display_columns(dataset)),
        rows=tuple(rows),
    )

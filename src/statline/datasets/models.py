"""Dataset data models.

- Dataset: a parsed, immutable snapshot with its inferred column kinds
- LoadResult: outcome of loading one dataset id, either the dataset or the
  reason it is unavailable
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from statline.core.enums import ColumnKind
from .registry import DatasetDefinition


@dataclass(frozen=True)
class Dataset:
    """A loaded snapshot.

    Attributes:
        dataset_id: Registry id (e.g. "batters").
        label: Human-readable label for the table caption.
        header: Column names in source order.
        rows: Records in source order; each maps every header column to its
            raw string (missing trailing fields are ``""``). Read-only.
        schema: Column → kind, inferred once at load time.
        definition: Registry definition the dataset was built from; carries
            the column roles the query engine needs.

    Examples:
        >>> ds.header
        ('選手', '打率')
        >>> ds.rows[0]['選手']
        '坂本'
    """

    dataset_id: str
    label: str
    header: Tuple[str, ...]
    rows: Tuple[Mapping[str, str], ...]
    schema: Mapping[str, ColumnKind] = field(default_factory=dict)
    definition: Optional[DatasetDefinition] = None

    def __len__(self) -> int:
        return len(self.rows)

    def is_numeric(self, column: str) -> bool:
        return self.schema.get(column) is ColumnKind.NUMERIC

    def describe(self) -> DatasetDefinition:
        """The definition, or a bare one when the dataset was built ad hoc."""
        if self.definition is not None:
            return self.definition
        return DatasetDefinition(dataset_id=self.dataset_id, label=self.label, path="")


@dataclass(frozen=True)
class LoadResult:
    """Outcome of ``DatasetStore.load``.

    ``ok=False`` is the explicit "could not load" state: ``dataset`` is None
    and ``reason`` says why. It never leaks into the store's cache.
    """

    dataset_id: str
    ok: bool
    dataset: Optional[Dataset] = None
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if self.ok and self.dataset is None:
            raise ValueError("ok=True requires a dataset")
        if not self.ok and self.dataset is not None:
            raise ValueError("ok=False must not carry a dataset")

    @classmethod
    def loaded(cls, dataset: Dataset) -> "LoadResult":
        return cls(dataset_id=dataset.dataset_id, ok=True, dataset=dataset)

    @classmethod
    def unavailable(cls, dataset_id: str, reason: str) -> "LoadResult":
        return cls(dataset_id=dataset_id, ok=False, reason=reason)

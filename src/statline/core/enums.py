"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class ValueKind(str, Enum):
    """Kind of a single classified cell."""

    EMPTY = "empty"
    NUMERIC = "numeric"
    TEXT = "text"


class ColumnKind(str, Enum):
    """Kind of a whole column, inferred once per dataset by sampling."""

    NUMERIC = "numeric"
    TEXT = "text"


class ColumnRole(str, Enum):
    """Semantic roles that change how a raw field is classified."""

    INNINGS = "innings"


class SortDirection(str, Enum):
    """Sort directions.

    Values are strings to ease serialization and CLI interchange.
    """

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class QualificationMetric(str, Enum):
    """Workload metric a dataset is qualified on."""

    PLATE_APPEARANCES = "plate_appearances"
    INNINGS = "innings"


__all__ = [
    "ValueKind",
    "ColumnKind",
    "ColumnRole",
    "SortDirection",
    "QualificationMetric",
]

"""Parsing and classification primitives shared by the dataset and query layers."""

from .csv_text import parse_csv, strip_bom
from .enums import ColumnKind, ColumnRole, QualificationMetric, SortDirection, ValueKind
from .values import (
    ComparableValue,
    classify,
    infer_schema,
    looks_numeric_column,
    number_or_none,
    parse_innings,
)

__all__ = [
    "parse_csv",
    "strip_bom",
    "ColumnKind",
    "ColumnRole",
    "QualificationMetric",
    "SortDirection",
    "ValueKind",
    "ComparableValue",
    "classify",
    "infer_schema",
    "looks_numeric_column",
    "number_or_none",
    "parse_innings",
]

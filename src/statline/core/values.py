"""Classification of raw CSV fields into comparable values.

Innings pitched use an overloaded decimal: ``6.1`` is six and one third,
``6.2`` six and two thirds. Any other fraction (``6.5``) is read as a plain
decimal, matching what the upstream exports contain.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence

from .enums import ColumnKind, ColumnRole, ValueKind

NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")

# How many non-empty cells are looked at when guessing a column's kind,
# and the share of them that must be numeric.
SAMPLE_SIZE = 20
NUMERIC_SHARE = 0.6

_THIRDS = {"1": 1.0 / 3.0, "2": 2.0 / 3.0}


@dataclass(frozen=True)
class ComparableValue:
    """A classified field: ``EMPTY``, ``NUMERIC(number)`` or ``TEXT(text)``.

    ``text`` always holds the trimmed raw string so mixed-kind comparisons
    can fall back to string ordering.
    """

    kind: ValueKind
    number: Optional[float] = None
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.kind is ValueKind.EMPTY

    @property
    def is_numeric(self) -> bool:
        return self.kind is ValueKind.NUMERIC


EMPTY = ComparableValue(ValueKind.EMPTY)


def _innings_number(s: str) -> float:
    whole, _, frac = s.partition(".")
    base = float(whole)
    if not frac:
        return base
    if frac in _THIRDS:
        return base + _THIRDS[frac]
    return float(s)


def classify(raw: Optional[str], role: Optional[ColumnRole] = None) -> ComparableValue:
    """Classify one raw field.

    Args:
        raw: The raw field; ``None`` is treated as empty.
        role: ``ColumnRole.INNINGS`` enables thirds-of-an-inning decoding.

    Returns:
        The comparable value.

    Examples:
        >>> classify("12.5").number
        12.5
        >>> round(classify("6.1", ColumnRole.INNINGS).number, 3)
        6.333
    """
    s = str(raw if raw is not None else "").strip()
    if not s:
        return EMPTY
    if NUMERIC_RE.match(s):
        if role is ColumnRole.INNINGS:
            return ComparableValue(ValueKind.NUMERIC, _innings_number(s), s)
        return ComparableValue(ValueKind.NUMERIC, float(s), s)
    return ComparableValue(ValueKind.TEXT, None, s)


def parse_innings(raw: Optional[str]) -> Optional[float]:
    """Innings pitched as a float, or None when the field is not numeric."""
    value = classify(raw, ColumnRole.INNINGS)
    return value.number if value.is_numeric else None


def number_or_none(raw: Optional[str]) -> Optional[float]:
    """Plain numeric value of a field, or None."""
    value = classify(raw)
    return value.number if value.is_numeric else None


def looks_numeric_column(
    rows: Iterable[Mapping[str, str]],
    column: str,
    role: Optional[ColumnRole] = None,
) -> bool:
    """Guess whether a column holds numbers.

    Samples up to the first ``SAMPLE_SIZE`` non-empty values and reports
    numeric when at least ``NUMERIC_SHARE`` of them classify as numeric.
    """
    seen = 0
    numeric = 0
    for row in rows:
        value = classify(row.get(column), role)
        if value.is_empty:
            continue
        seen += 1
        if value.is_numeric:
            numeric += 1
        if seen >= SAMPLE_SIZE:
            break
    return seen > 0 and numeric / seen >= NUMERIC_SHARE


def infer_schema(
    header: Sequence[str],
    rows: Sequence[Mapping[str, str]],
    roles: Optional[Mapping[str, ColumnRole]] = None,
) -> Dict[str, ColumnKind]:
    """Infer every column's kind once, for memoizing alongside the dataset."""
    roles = roles or {}
    return {
        column: (
            ColumnKind.NUMERIC
            if looks_numeric_column(rows, column, roles.get(column))
            else ColumnKind.TEXT
        )
        for column in header
    }


__all__ = [
    "ComparableValue",
    "EMPTY",
    "NUMERIC_RE",
    "classify",
    "parse_innings",
    "number_or_none",
    "looks_numeric_column",
    "infer_schema",
]

"""Lenient delimited-text parser for the stat snapshots.

The snapshots are exported by hand from spreadsheets, so the parser never
fails: quoting irregularities degrade to "the rest of the input is quoted
content" instead of raising.
"""

from __future__ import annotations

from typing import List

BOM = "\ufeff"
QUOTE = '"'
DELIMITER = ","


def strip_bom(text: str) -> str:
    """Drop a leading UTF-8 byte order mark, if any."""
    if text.startswith(BOM):
        return text[len(BOM):]
    return text


def _is_blank_row(row: List[str]) -> bool:
    return all(field == "" for field in row)


def parse_csv(text: str) -> List[List[str]]:
    """Split CSV text into rows of raw string fields.

    - A quote opens a quoted span; ``""`` inside it is a literal quote.
    - Commas and newlines inside a quoted span are field content.
    - ``\\r`` outside quotes is dropped; ``\\n`` outside quotes ends a row.
    - Trailing rows made only of empty fields are discarded.
    - An unterminated quote consumes the remainder of the input.

    Args:
        text: Raw decoded text, optionally BOM-prefixed.

    Returns:
        Rows in source order, header first. Empty input gives ``[]``.

    Examples:
        >>> parse_csv('name,note\\nA,"x,y"\\n')
        [['name', 'note'], ['A', 'x,y']]
    """
    text = strip_bom(text or "")
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if in_quotes:
            if c == QUOTE:
                if i + 1 < n and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 1
                else:
                    in_quotes = False
            else:
                field.append(c)
        elif c == QUOTE:
            in_quotes = True
        elif c == DELIMITER:
            row.append("".join(field))
            field = []
        elif c == "\r":
            pass
        elif c == "\n":
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        else:
            field.append(c)
        i += 1

    row.append("".join(field))
    rows.append(row)

    while rows and _is_blank_row(rows[-1]):
        rows.pop()
    return rows


__all__ = ["BOM", "strip_bom", "parse_csv"]

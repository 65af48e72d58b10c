"""Tests for value classification and column kind sampling."""

import pytest

from statline.core.enums import ColumnKind, ColumnRole, ValueKind
from statline.core.values import (
    classify,
    infer_schema,
    looks_numeric_column,
    number_or_none,
    parse_innings,
)


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty(raw):
    assert classify(raw).kind is ValueKind.EMPTY


@pytest.mark.parametrize(
    "raw, expected",
    [("12", 12.0), ("12.5", 12.5), ("-3", -3.0), (" 0.310 ", 0.31), ("007", 7.0)],
)
def test_numeric(raw, expected):
    value = classify(raw)
    assert value.kind is ValueKind.NUMERIC
    assert value.number == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["abc", "1.2.3", ".300", "12-3", "○6-5"])
def test_text(raw):
    value = classify(raw)
    assert value.kind is ValueKind.TEXT
    assert value.text == raw.strip()


def test_innings_thirds():
    assert classify("6.1", ColumnRole.INNINGS).number == pytest.approx(6 + 1 / 3)
    assert classify("6.2", ColumnRole.INNINGS).number == pytest.approx(6 + 2 / 3)


def test_innings_other_fractions_are_plain_decimals():
    assert classify("6.5", ColumnRole.INNINGS).number == pytest.approx(6.5)
    assert classify("6.10", ColumnRole.INNINGS).number == pytest.approx(6.1)
    assert classify("130", ColumnRole.INNINGS).number == pytest.approx(130.0)


def test_innings_role_only_applies_when_requested():
    assert classify("6.1").number == pytest.approx(6.1)


def test_parse_innings_and_number_or_none():
    assert parse_innings("150.1") == pytest.approx(150 + 1 / 3)
    assert parse_innings("") is None
    assert parse_innings("DNP") is None
    assert number_or_none("403") == 403.0
    assert number_or_none("n/a") is None


def test_looks_numeric_column_threshold():
    three_of_five = [{"c": v} for v in ["1", "2", "3", "x", "y"]]
    two_of_five = [{"c": v} for v in ["1", "2", "x", "y", "z"]]
    assert looks_numeric_column(three_of_five, "c") is True
    assert looks_numeric_column(two_of_five, "c") is False


def test_looks_numeric_column_skips_empty_and_samples_first_twenty():
    rows = [{"c": ""}] * 5 + [{"c": str(i)} for i in range(20)] + [{"c": "x"}] * 50
    assert looks_numeric_column(rows, "c") is True


def test_looks_numeric_column_without_values():
    assert looks_numeric_column([{"c": ""}, {}], "c") is False


def test_infer_schema_uses_roles():
    rows = [{"name": "a", "ip": "6.1"}, {"name": "b", "ip": "7.2"}]
    schema = infer_schema(["name", "ip"], rows, {"ip": ColumnRole.INNINGS})
    assert schema == {"name": ColumnKind.TEXT, "ip": ColumnKind.NUMERIC}

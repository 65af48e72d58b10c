"""Tests for type-aware sorting and sort-direction defaults."""

from statline.core.enums import ColumnRole, SortDirection
from statline.query import QueryState, default_sort_direction, sort_rows, toggle_sort

from conftest import col


def _values(rows):
    return [r["v"] for r in rows]


def _rows(*values):
    return [{"v": v} for v in values]


def test_empty_always_last():
    rows = _rows("", "3", "1")
    assert _values(sort_rows(rows, "v", SortDirection.ASC)) == ["1", "3", ""]
    assert _values(sort_rows(rows, "v", SortDirection.DESC)) == ["3", "1", ""]


def test_sort_is_stable_in_both_directions():
    rows = [{"id": "a", "v": "1"}, {"id": "b", "v": "2"}, {"id": "c", "v": "1"}, {"id": "d", "v": ""}]
    asc = sort_rows(rows, "v", SortDirection.ASC)
    desc = sort_rows(rows, "v", SortDirection.DESC)
    assert [r["id"] for r in asc] == ["a", "c", "b", "d"]
    assert [r["id"] for r in desc] == ["b", "a", "c", "d"]


def test_numbers_compare_by_value_not_text():
    assert _values(sort_rows(_rows("10", "9", "100"), "v")) == ["9", "10", "100"]


def test_mixed_kinds_fall_back_to_string_comparison():
    assert _values(sort_rows(_rows("10", "abc", "9"), "v")) == ["9", "10", "abc"]
    assert _values(sort_rows(_rows("10", "abc", "9"), "v", SortDirection.DESC)) == ["abc", "10", "9"]


def test_text_sorting():
    assert _values(sort_rows(_rows("b", "a", "", "c"), "v")) == ["a", "b", "c", ""]


def test_innings_role_changes_order():
    rows = _rows("6.5", "6.2")
    assert _values(sort_rows(rows, "v", SortDirection.ASC, ColumnRole.INNINGS)) == ["6.5", "6.2"]
    assert _values(sort_rows(rows, "v", SortDirection.ASC)) == ["6.2", "6.5"]


def test_default_sort_direction(pitchers, batters):
    assert default_sort_direction(pitchers, col("pitchers", "era")) is SortDirection.ASC
    assert default_sort_direction(pitchers, col("pitchers", "strikeouts")) is SortDirection.DESC
    assert default_sort_direction(batters, col("batters", "home_runs")) is SortDirection.DESC
    assert default_sort_direction(batters, col("batters", "player")) is SortDirection.ASC


def test_toggle_sort(pitchers):
    era, wins = col("pitchers", "era"), col("pitchers", "wins")
    state = toggle_sort(QueryState(free_text="戸"), era, pitchers)
    assert (state.sort_column, state.sort_direction) == (era, SortDirection.ASC)
    assert state.free_text == "戸"
    state = toggle_sort(state, era, pitchers)
    assert state.sort_direction is SortDirection.DESC
    state = toggle_sort(state, wins, pitchers)
    assert (state.sort_column, state.sort_direction) == (wins, SortDirection.DESC)
    assert state.without_sort().sort_column is None


def test_text_order_ignores_case_and_width():
    ordered = _values(sort_rows(_rows("b", "B", "a", "A"), "v"))
    assert ordered.index("a") < ordered.index("B")
    assert ordered.index("A") < ordered.index("b")
    assert _values(sort_rows(_rows("Ｂ", "a", "c"), "v")) == ["a", "Ｂ", "c"]


def test_text_order_stays_stable_for_identical_keys():
    rows = [{"id": 1, "v": "x"}, {"id": 2, "v": "x"}]
    assert [r["id"] for r in sort_rows(rows, "v", SortDirection.DESC)] == [1, 2]

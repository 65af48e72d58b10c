"""Tests for table views and game-log summaries."""

from datetime import date

from statline.datasets import LoadResult
from statline.qualification import thresholds_for
from statline.query import QueryState, build_view, recent_games, upcoming_games
from statline.query.games import parse_game_date

from conftest import GAMES_SYMBOLS, col, csv_text, make_dataset, rows_of


def test_view_of_loaded_dataset(games):
    view = build_view(LoadResult.loaded(games), None, QueryState())
    assert view.available
    assert view.dataset_label == "試合結果"
    assert view.header == tuple(col("games", s) for s in GAMES_SYMBOLS)
    assert view.row_count == 4


def test_view_without_display_config_uses_header(batters):
    view = build_view(LoadResult.loaded(batters), thresholds_for(130), QueryState(qualified_only=True))
    assert view.header == batters.header
    assert view.row_count == 2


def test_view_of_unavailable_dataset():
    view = build_view(LoadResult.unavailable("pitchers", "HTTP 503"), None, QueryState(), label="投手")
    assert view.available is False
    assert view.reason == "HTTP 503"
    assert view.dataset_label == "投手"
    assert view.rows == ()
    assert view.row_count == 0


def test_parse_game_date_formats():
    assert parse_game_date("2025-04-01") == date(2025, 4, 1)
    assert parse_game_date("2025/4/1") == date(2025, 4, 1)
    assert parse_game_date("2025年4月1日(火)") == date(2025, 4, 1)
    assert parse_game_date("2025-02-30") is None
    assert parse_game_date("") is None


def test_recent_games_newest_first(games):
    recent = recent_games(games, limit=2)
    assert [e.played_on for e in recent] == [date(2025, 4, 4), date(2025, 4, 3)]
    assert len(recent_games(games)) == 4
    assert recent_games(games, limit=0) == []


def test_upcoming_games_window(games):
    upcoming = upcoming_games(games, today=date(2025, 4, 1))
    assert [e.played_on for e in upcoming] == [date(2025, 4, 5)]
    assert upcoming_games(games, today=date(2025, 4, 6)) == []
    assert len(upcoming_games(games, today=date(2025, 3, 30), days=7)) == 1
    assert upcoming_games(games, today=date(2025, 3, 29), days=7) == []


def test_recent_games_sorts_out_of_order_log():
    text = csv_text(
        "games",
        GAMES_SYMBOLS,
        [("2025-04-03", "木", "Lions", "○1-0", "A"), ("2025-04-01", "火", "Carp", "●0-1", "B")],
    )
    recent = recent_games(make_dataset("games", text))
    assert rows_of([e.row for e in recent], "games", "starter") == ["A", "B"]

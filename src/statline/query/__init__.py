"""Query engine public API.

Composes facet, qualification, free-text filtering and type-aware sorting
over a loaded dataset. Everything here is synchronous and stateless; the
only session state lives in ``statline.datasets.DatasetStore``.
"""

from .engine import (
    facet_options,
    filter_by_facet,
    filter_by_text,
    filter_qualified,
    hide_incomplete_rows,
    normalize_for_search,
    query,
    sortable_columns,
)
from .games import GameEntry, recent_games, upcoming_games
from .sorting import default_sort_direction, sort_rows, toggle_sort
from .state import QueryState
from .view import TableView, build_view, display_columns

__all__ = [
    "query",
    "QueryState",
    "TableView",
    "build_view",
    "display_columns",
    "facet_options",
    "sortable_columns",
    "default_sort_direction",
    "toggle_sort",
    "sort_rows",
    "normalize_for_search",
    "hide_incomplete_rows",
    "filter_by_facet",
    "filter_qualified",
    "filter_by_text",
    "GameEntry",
    "recent_games",
    "upcoming_games",
]

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from statline.core.enums import SortDirection


@dataclass(frozen=True)
class QueryState:
    """Everything the UI controls about one table query.

    Attributes:
        free_text: Search box contents; blank means no text filter.
        facet_value: Selected facet (e.g. opponent); None means all.
        sort_column: Literal header to sort by; None keeps source order.
        sort_direction: Direction for ``sort_column``.
        qualified_only: Restrict leader datasets to qualified rows.
    """

    free_text: str = ""
    facet_value: Optional[str] = None
    sort_column: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC
    qualified_only: bool = False

    def with_text(self, free_text: str) -> "QueryState":
        return replace(self, free_text=free_text)

    def with_facet(self, facet_value: Optional[str]) -> "QueryState":
        return replace(self, facet_value=facet_value or None)

    def with_qualified(self, qualified_only: bool) -> "QueryState":
        return replace(self, qualified_only=qualified_only)

    def without_sort(self) -> "QueryState":
        return replace(self, sort_column=None, sort_direction=SortDirection.ASC)

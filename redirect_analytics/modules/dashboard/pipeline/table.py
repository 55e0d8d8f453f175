"""
Table view state and the filter -> sort -> paginate pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from redirect_analytics.modules.dashboard.domain.models import (
    FilterSpec,
    PageSpec,
    SortSpec,
    TableView,
    TrackingEvent,
)
from redirect_analytics.modules.dashboard.pipeline.filtering import apply_filters
from redirect_analytics.modules.dashboard.pipeline.pagination import DEFAULT_PAGE_SIZE, paginate
from redirect_analytics.modules.dashboard.pipeline.sorting import apply_sort, toggle_sort


@dataclass(frozen=True)
class TableState:
    """
    Snapshot of the user's table controls.

    Every transition returns a new snapshot. Changing filters, sort or page
    size always returns to the first page, so a page number is never shown
    against a result set it was not computed for.
    """

    filters: FilterSpec = field(default_factory=FilterSpec)
    sort: Optional[SortSpec] = None
    page: PageSpec = field(default_factory=lambda: PageSpec(size=DEFAULT_PAGE_SIZE))

    @property
    def has_active_filters(self) -> bool:
        return self.filters.is_active

    def _first_page(self) -> PageSpec:
        return PageSpec(size=self.page.size, index=1)

    def with_filter(self, name: str, term: str) -> "TableState":
        return replace(self, filters=self.filters.with_field(name, term), page=self._first_page())

    def with_global_term(self, term: str) -> "TableState":
        return replace(self, filters=self.filters.with_global_term(term), page=self._first_page())

    def clear_filters(self) -> "TableState":
        return replace(self, filters=FilterSpec(), page=self._first_page())

    def toggle_sort(self, key: str) -> "TableState":
        return replace(self, sort=toggle_sort(self.sort, key), page=self._first_page())

    def with_page_size(self, size: int) -> "TableState":
        return replace(self, page=PageSpec(size=size, index=1))

    def go_to_page(self, index: int) -> "TableState":
        return replace(self, page=PageSpec(size=self.page.size, index=index))


def build_table_view(events: Sequence[TrackingEvent], state: Optional[TableState] = None) -> TableView:
    state = state or TableState()
    filtered = apply_filters(events, state.filters)
    ordered = apply_sort(filtered, state.sort)
    window = paginate(ordered, state.page)
    return TableView(
        items=window.items,
        total_count=len(events),
        filtered_count=len(ordered),
        page=window,
    )

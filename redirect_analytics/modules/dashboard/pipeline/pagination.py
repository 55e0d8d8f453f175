from __future__ import annotations

import logging
import math
from typing import Sequence

from redirect_analytics.modules.dashboard.domain.models import PageSpec, PageWindow, TrackingEvent

logger = logging.getLogger(__name__)

PAGE_SIZE_OPTIONS = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 25


def count_pages(total_count: int, size: int) -> int:
    return max(1, math.ceil(total_count / size))


def clamp_page_index(index: int, total_count: int, size: int) -> int:
    return min(max(1, index), count_pages(total_count, size))


def paginate(records: Sequence[TrackingEvent], page: PageSpec) -> PageWindow:
    """
    Cut one page out of an already filtered and sorted collection.

    An index past the last page is clamped to the last page; the returned
    window reports the index actually used. ``first_index`` and
    ``last_index`` are 1-based and inclusive, both 0 for an empty
    collection.
    """
    total_count = len(records)
    total_pages = count_pages(total_count, page.size)
    index = clamp_page_index(page.index, total_count, page.size)
    if index != page.index:
        logger.debug("Page %d out of range (1..%d); using %d", page.index, total_pages, index)

    start = (index - 1) * page.size
    end = min(start + page.size, total_count)
    return PageWindow(
        items=tuple(records[start:end]),
        index=index,
        size=page.size,
        total_pages=total_pages,
        first_index=start + 1 if total_count else 0,
        last_index=end,
        total_count=total_count,
    )

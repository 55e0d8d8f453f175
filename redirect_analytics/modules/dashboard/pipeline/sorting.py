"""
Stable single-key sorting of tracking events.
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable, Iterable, List, Optional

from redirect_analytics.modules.dashboard.domain.models import (
    SortDirection,
    SortSpec,
    TrackingEvent,
)
from redirect_analytics.modules.dashboard.pipeline.filtering import field_text
from redirect_analytics.modules.dashboard.utils.timestamps import parse_timestamp


_EARLIEST = datetime.min.replace(tzinfo=UTC)


def _occurred_at_key(event: TrackingEvent) -> tuple:
    parsed = parse_timestamp(event.timestamp)
    if parsed is None:
        # unparsable timestamps order before every valid one, among themselves by raw text
        return (0, _EARLIEST, event.timestamp)
    return (1, parsed, "")


def sort_key_for(key: str) -> Callable[[TrackingEvent], Any]:
    if key == "occurred_at":
        return _occurred_at_key
    if key == "ttl_seconds":
        return lambda event: event.ttl_seconds
    return lambda event: field_text(event, key)


def apply_sort(events: Iterable[TrackingEvent], spec: Optional[SortSpec]) -> List[TrackingEvent]:
    """
    Return a sorted copy of ``events``.

    Equal keys keep their input order in both directions. Without a spec
    the input order is returned unchanged.
    """
    if spec is None:
        return list(events)
    return sorted(
        events,
        key=sort_key_for(spec.key),
        reverse=spec.direction is SortDirection.DESCENDING,
    )


def toggle_sort(current: Optional[SortSpec], key: str) -> SortSpec:
    if current is not None and current.key == key:
        return SortSpec(key=key, direction=current.direction.flipped())
    return SortSpec(key=key, direction=SortDirection.ASCENDING)

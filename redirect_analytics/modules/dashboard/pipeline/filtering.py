"""
Case-insensitive substring filtering of tracking events.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from redirect_analytics.modules.dashboard.domain.models import FilterSpec, TrackingEvent


GLOBAL_SEARCH_FIELDS = (
    "source_attribution",
    "destination_url",
    "client_address",
    "event_id",
    "display_timestamp",
)
SEARCH_SEPARATOR = " "


def field_text(event: TrackingEvent, name: str) -> str:
    value = getattr(event, name, None)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def searchable_text(event: TrackingEvent) -> str:
    return SEARCH_SEPARATOR.join(field_text(event, name) for name in GLOBAL_SEARCH_FIELDS)


def matches(event: TrackingEvent, spec: FilterSpec) -> bool:
    """
    Check one event against a filter snapshot.

    The event passes when it contains the global term in any searchable
    field and every non-empty per-field term in that field. Empty terms
    always pass.
    """
    if spec.global_term and spec.global_term.lower() not in searchable_text(event).lower():
        return False

    for name, term in spec.per_field.items():
        if not term:
            continue
        if term.lower() not in field_text(event, name).lower():
            return False

    return True


def apply_filters(events: Iterable[TrackingEvent], spec: Optional[FilterSpec]) -> List[TrackingEvent]:
    if spec is None or not spec.is_active:
        return list(events)
    return [event for event in events if matches(event, spec)]

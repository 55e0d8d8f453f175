from __future__ import annotations

from typing import Iterable, Tuple

from redirect_analytics.modules.dashboard.domain.models import (
    AggregateRecord,
    FilterOptions,
    TrackingEvent,
)


def available_sources(aggregates: Iterable[AggregateRecord]) -> Tuple[str, ...]:
    return tuple(sorted({record.source_attribution for record in aggregates if record.source_attribution}))


def available_destinations(events: Iterable[TrackingEvent]) -> Tuple[str, ...]:
    return tuple(sorted({event.destination_url for event in events if event.destination_url}))


def build_filter_options(
    aggregates: Iterable[AggregateRecord],
    events: Iterable[TrackingEvent],
) -> FilterOptions:
    return FilterOptions(sources=available_sources(aggregates), destinations=available_destinations(events))

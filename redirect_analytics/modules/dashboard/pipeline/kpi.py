"""
Scalar KPIs for the summary cards.
"""
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Iterable, Optional

from redirect_analytics.modules.dashboard.domain.models import (
    AggregateRecord,
    EventKPIs,
    KPISet,
    TrackingEvent,
)
from redirect_analytics.modules.dashboard.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 24


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


def kpis_from_aggregates(aggregates: Iterable[AggregateRecord]) -> KPISet:
    """
    Fold aggregate records into the summary KPIs.

    The top category is the first record with the highest count in input
    order. The average is rounded half up.
    """
    records = list(aggregates)
    if not records:
        return KPISet.empty()

    top = records[0]
    for record in records[1:]:
        if record.count > top.count:
            top = record

    total_count = sum(record.count for record in records)
    category_count = len(records)
    return KPISet(
        total_count=total_count,
        total_unique_clients=sum(record.unique_client_count for record in records),
        top_category_label=top.display_source,
        top_category_count=top.count,
        category_count=category_count,
        average_per_category=_round_half_up(total_count, category_count),
    )


def kpis_from_events(
    events: Iterable[TrackingEvent],
    window_hours: int = DEFAULT_WINDOW_HOURS,
    now: Optional[datetime] = None,
) -> EventKPIs:
    """
    Count distinct destinations, distinct clients and recent events.

    An event is recent when its timestamp is later than ``now`` minus
    ``window_hours``. Events with unparsable timestamps are left out of the
    recent count but still count towards the distinct values.
    """
    cutoff = (now or datetime.now(UTC)) - timedelta(hours=window_hours)

    destinations: set[str] = set()
    clients: set[str] = set()
    recent = 0
    skipped = 0
    for event in events:
        destinations.add(event.destination_url)
        clients.add(event.client_address)
        parsed = parse_timestamp(event.timestamp)
        if parsed is None:
            skipped += 1
            continue
        if parsed > cutoff:
            recent += 1

    if skipped:
        logger.debug("Excluded %d events with invalid timestamps from recent activity", skipped)

    return EventKPIs(
        unique_destinations=len(destinations),
        unique_clients=len(clients),
        recent_count=recent,
    )

"""
Daily bucketing of tracking events.

Buckets are keyed by the UTC calendar date of each event, so the series
does not depend on the viewer's timezone.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from redirect_analytics.modules.dashboard.domain.models import TimeBucket, TimeSeries, TrackingEvent
from redirect_analytics.modules.dashboard.utils.timestamps import parse_timestamp, utc_date_key

logger = logging.getLogger(__name__)


def bucket_by_day(events: Iterable[TrackingEvent]) -> List[TimeBucket]:
    """
    Count events per UTC day.

    Events whose timestamp cannot be parsed are skipped and logged; they
    never abort the series.

    Returns:
        Buckets in ascending date order, one per day with at least one event
    """
    counts: Dict[date, int] = {}
    for event in events:
        parsed = parse_timestamp(event.timestamp)
        if parsed is None:
            logger.warning("Invalid timestamp found: %r (event %s)", event.timestamp, event.event_id or "?")
            continue
        key = utc_date_key(parsed)
        counts[key] = counts.get(key, 0) + 1

    return [TimeBucket(date_key=key, count=counts[key]) for key in sorted(counts)]


def build_time_series(events: Iterable[TrackingEvent]) -> TimeSeries:
    return TimeSeries(buckets=tuple(bucket_by_day(events)))


def fill_missing_days(
    buckets: Sequence[TimeBucket],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[TimeBucket]:
    """
    Expand a sparse series into one bucket per day, zero-filling the gaps.

    Args:
        buckets: Ascending buckets as produced by ``bucket_by_day``
        start: First day of the axis, defaults to the first bucket
        end: Last day of the axis, defaults to the last bucket

    Returns:
        Dense ascending buckets from ``start`` to ``end`` inclusive
    """
    if not buckets and (start is None or end is None):
        return []

    by_day = {bucket.date_key: bucket.count for bucket in buckets}
    current = start or buckets[0].date_key
    last = end or buckets[-1].date_key

    filled: List[TimeBucket] = []
    while current <= last:
        filled.append(TimeBucket(date_key=current, count=by_day.get(current, 0)))
        current += timedelta(days=1)
    return filled

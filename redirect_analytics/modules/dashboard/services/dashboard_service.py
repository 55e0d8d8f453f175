"""
Dashboard service: snapshot loading and view assembly.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Optional

from redirect_analytics.modules.dashboard.domain.interfaces import AnalyticsSource
from redirect_analytics.modules.dashboard.domain.models import DashboardSnapshot, DashboardView
from redirect_analytics.modules.dashboard.pipeline.distribution import (
    DEFAULT_TOP_K,
    build_bar_series,
    build_distribution_series,
)
from redirect_analytics.modules.dashboard.pipeline.kpi import (
    DEFAULT_WINDOW_HOURS,
    kpis_from_aggregates,
    kpis_from_events,
)
from redirect_analytics.modules.dashboard.pipeline.options import build_filter_options
from redirect_analytics.modules.dashboard.pipeline.table import TableState, build_table_view
from redirect_analytics.modules.dashboard.pipeline.time_series import build_time_series
from redirect_analytics.modules.dashboard.utils.payloads import parse_aggregates, parse_events

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        source: AnalyticsSource,
        *,
        top_destinations: int = DEFAULT_TOP_K,
        recent_window_hours: int = DEFAULT_WINDOW_HOURS,
    ) -> None:
        self._source = source
        self._top_destinations = top_destinations
        self._recent_window_hours = recent_window_hours

    async def load_snapshot(self) -> DashboardSnapshot:
        """
        Fetch events and aggregates concurrently.

        The snapshot is all-or-nothing: if either fetch fails the other one
        is cancelled, the first error propagates and no partial snapshot is
        returned.

        Raises:
            AnalyticsSourceError: If the source rejects either request
        """
        try:
            async with asyncio.TaskGroup() as group:
                events_task = group.create_task(self._source.fetch_events())
                aggregates_task = group.create_task(self._source.fetch_aggregates())
        except BaseExceptionGroup as failures:
            raise failures.exceptions[0] from None

        snapshot = DashboardSnapshot(
            events=tuple(parse_events(events_task.result())),
            aggregates=tuple(parse_aggregates(aggregates_task.result())),
            fetched_at=datetime.now(UTC),
        )
        logger.info(
            "Loaded snapshot: %d events, %d aggregate records",
            len(snapshot.events),
            len(snapshot.aggregates),
        )
        return snapshot

    def build(
        self,
        snapshot: DashboardSnapshot,
        state: Optional[TableState] = None,
        *,
        now: Optional[datetime] = None,
    ) -> DashboardView:
        """Recompute every view of the dashboard from one snapshot."""
        now = now or datetime.now(UTC)
        return DashboardView(
            table=build_table_view(snapshot.events, state),
            time_series=build_time_series(snapshot.events),
            distribution=build_distribution_series(snapshot.aggregates, top_k=self._top_destinations),
            bars=build_bar_series(snapshot.aggregates),
            kpis=kpis_from_aggregates(snapshot.aggregates),
            event_kpis=kpis_from_events(snapshot.events, window_hours=self._recent_window_hours, now=now),
            filter_options=build_filter_options(snapshot.aggregates, snapshot.events),
            generated_at=now,
        )

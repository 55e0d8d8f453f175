"""
Export service turning dashboard data into downloadable artifacts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, Tuple

from redirect_analytics.modules.dashboard.domain.errors import ExportFailure, UnsupportedExportError
from redirect_analytics.modules.dashboard.domain.models import (
    AggregateRecord,
    DashboardView,
    TrackingEvent,
)
from redirect_analytics.modules.dashboard.export.charts import (
    ChartSurface,
    render_bar_chart,
    render_line_chart,
    render_pie_chart,
)
from redirect_analytics.modules.dashboard.export.compositor import (
    DEFAULT_BACKGROUND,
    ChartLayout,
    compose,
    parse_layout,
)
from redirect_analytics.modules.dashboard.export.delimited import (
    aggregates_to_csv,
    combined_to_csv,
    events_to_csv,
)
from redirect_analytics.modules.dashboard.utils.formatting import export_filename

logger = logging.getLogger(__name__)


class ExportKind(str, Enum):
    EVENTS = "events"
    AGGREGATES = "aggregate"
    COMBINED = "combined"
    CHARTS = "charts"


_FILENAME_PREFIXES = {
    ExportKind.EVENTS: "tracking-events",
    ExportKind.AGGREGATES: "aggregate-stats",
    ExportKind.COMBINED: "analytics-export",
    ExportKind.CHARTS: "combined-charts",
}


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class ExportOutcome:
    artifact: Optional[ExportArtifact] = None
    error: Optional[ExportFailure] = None

    @property
    def ok(self) -> bool:
        return self.artifact is not None


class ExportService:
    def __init__(
        self,
        *,
        chart_size: Tuple[int, int] = (1200, 600),
        layout: "ChartLayout | str" = ChartLayout.VERTICAL,
        background: str = DEFAULT_BACKGROUND,
    ) -> None:
        self._chart_size = chart_size
        self._layout = layout
        self._background = background

    def export(
        self,
        kind: "ExportKind | str",
        *,
        events: Sequence[TrackingEvent] = (),
        aggregates: Sequence[AggregateRecord] = (),
        view: Optional[DashboardView] = None,
        now: Optional[datetime] = None,
    ) -> ExportOutcome:
        """
        Produce one export artifact.

        Failures are returned in the outcome instead of raised, so the
        caller only has to look at one value to decide what to show.
        """
        try:
            artifact = self._build(kind, events=events, aggregates=aggregates, view=view, now=now)
        except ExportFailure as exc:
            logger.warning("Export %s failed: %s", getattr(kind, "value", kind), exc)
            return ExportOutcome(error=exc)
        logger.info("Exported %s (%d bytes)", artifact.filename, len(artifact.data))
        return ExportOutcome(artifact=artifact)

    def _build(
        self,
        kind: "ExportKind | str",
        *,
        events: Sequence[TrackingEvent],
        aggregates: Sequence[AggregateRecord],
        view: Optional[DashboardView],
        now: Optional[datetime],
    ) -> ExportArtifact:
        try:
            kind = ExportKind(kind)
        except ValueError:
            raise UnsupportedExportError(f"Invalid export type: {kind}") from None

        prefix = _FILENAME_PREFIXES[kind]
        if kind is ExportKind.CHARTS:
            data = compose(self.chart_surfaces(view), parse_layout(self._layout), self._background)
            return ExportArtifact(export_filename(prefix, "png", now), "image/png", data)

        if kind is ExportKind.EVENTS:
            text = events_to_csv(events)
        elif kind is ExportKind.AGGREGATES:
            text = aggregates_to_csv(aggregates)
        else:
            text = combined_to_csv(events, aggregates)
        return ExportArtifact(export_filename(prefix, "csv", now), "text/csv", text.encode("utf-8"))

    def chart_surfaces(self, view: Optional[DashboardView]) -> list[ChartSurface]:
        if view is None:
            return []
        return [
            render_line_chart(view.time_series, size=self._chart_size),
            render_pie_chart(view.distribution, size=self._chart_size),
            render_bar_chart(view.bars, size=self._chart_size),
        ]

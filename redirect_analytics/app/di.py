from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import AppConfig
from ..modules.dashboard.domain.interfaces import AnalyticsSource
from ..modules.dashboard.infrastructure.artifacts import ArtifactWriter
from ..modules.dashboard.infrastructure.json_source import JsonFileAnalyticsSource
from ..modules.dashboard.pipeline.table import TableState
from ..modules.dashboard.domain.models import PageSpec
from ..modules.dashboard.services.dashboard_service import DashboardService
from ..modules.dashboard.services.export_service import ExportService

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    config: AppConfig
    source: AnalyticsSource
    dashboard_service: DashboardService
    export_service: ExportService
    artifact_writer: ArtifactWriter

    @classmethod
    async def build(cls, config: AppConfig, source: AnalyticsSource | None = None) -> "AppContainer":
        source = source or JsonFileAnalyticsSource(config.events_path, config.aggregates_path)
        dashboard_service = DashboardService(
            source,
            top_destinations=config.top_destinations,
            recent_window_hours=config.recent_window_hours,
        )
        export_service = ExportService(
            chart_size=config.chart_size,
            layout=config.chart_layout,
            background=config.chart_background,
        )
        logger.debug("Container built with export dir %s", config.export_dir)
        return cls(
            config=config,
            source=source,
            dashboard_service=dashboard_service,
            export_service=export_service,
            artifact_writer=ArtifactWriter(config.export_dir),
        )

    def initial_table_state(self) -> TableState:
        return TableState(page=PageSpec(size=self.config.page_size))

from __future__ import annotations

import asyncio
import logging

from .config import AppConfig
from .di import AppContainer
from ..modules.dashboard.domain.errors import AnalyticsSourceError, classify_error
from ..modules.dashboard.services.export_service import ExportKind
from ..modules.dashboard.utils.formatting import format_kpi_value

logger = logging.getLogger(__name__)


async def run(container: AppContainer) -> int:
    service = container.dashboard_service
    try:
        snapshot = await service.load_snapshot()
    except AnalyticsSourceError as exc:
        processed = classify_error(exc, context="load_snapshot")
        logger.exception("Failed to load analytics: %s", processed.user_message)
        for suggestion in processed.suggestions:
            logger.info("Suggestion: %s", suggestion)
        return 1

    view = service.build(snapshot, container.initial_table_state())
    kpis = view.kpis
    logger.info(
        "Total clicks: %s, unique clients: %s, sources: %s, top: %s (%s), average: %s",
        format_kpi_value(kpis.total_count),
        format_kpi_value(kpis.total_unique_clients),
        format_kpi_value(kpis.category_count),
        kpis.top_category_label,
        format_kpi_value(kpis.top_category_count),
        format_kpi_value(kpis.average_per_category),
    )
    logger.info(
        "Events: %d shown of %d, recent: %d",
        len(view.table.page.items),
        view.table.total_count,
        view.event_kpis.recent_count,
    )

    exports = container.export_service
    csv_outcome = exports.export(
        ExportKind.COMBINED,
        events=snapshot.events,
        aggregates=snapshot.aggregates,
        now=view.generated_at,
    )
    if not csv_outcome.ok:
        logger.error("Nothing to export: %s", csv_outcome.error)
        return 1

    written = [await container.artifact_writer.write(csv_outcome.artifact)]
    charts_outcome = exports.export(ExportKind.CHARTS, view=view, now=view.generated_at)
    if charts_outcome.ok:
        written.append(await container.artifact_writer.write(charts_outcome.artifact))

    for path in written:
        logger.info("Wrote %s", path)
    return 0


async def main() -> int:
    config = AppConfig()
    config.ensure_dirs()
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))

    container = await AppContainer.build(config)
    return await run(container)


def cli() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    cli()

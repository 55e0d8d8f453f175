"""
Display formatting helpers for KPI cards, chart labels and export filenames.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal, Optional
from urllib.parse import urlsplit

from redirect_analytics.modules.dashboard.domain.models import OTHERS_LABEL


KPIKind = Literal["count", "percentage", "currency"]
TrendDirection = Literal["up", "down", "stable"]

TREND_STABLE_THRESHOLD = 1.0


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    percentage: float


def format_kpi_value(value: float, kind: KPIKind = "count") -> str:
    if kind == "count":
        return f"{value:,}"
    if kind == "percentage":
        return f"{value:.1f}%"
    if kind == "currency":
        return f"${value:,}"
    return str(value)


def trend_indicator(current: float, previous: float) -> Trend:
    """
    Compare a KPI against its previous value.

    Changes under one percent, and any comparison against zero, are
    reported as stable.
    """
    if previous == 0:
        return Trend(direction="stable", percentage=0.0)

    change = (current - previous) / previous * 100
    if abs(change) < TREND_STABLE_THRESHOLD:
        return Trend(direction="stable", percentage=0.0)

    return Trend(direction="up" if change > 0 else "down", percentage=abs(change))


def format_url_label(url: str, max_length: int = 30) -> str:
    """
    Shorten a destination URL for a chart legend.

    Keeps the host and as much of the path as fits, e.g.
    ``https://example.com/a/very/long/path`` -> ``example.com/a/very/long/pat...``.
    """
    if url == OTHERS_LABEL or len(url) <= max_length:
        return url

    parts = urlsplit(url)
    host = parts.hostname
    if not host:
        return url[: max_length - 3] + "..."

    if len(host) + 3 >= max_length:
        return host[: max_length - 3] + "..."

    path = parts.path + (f"?{parts.query}" if parts.query else "")
    available = max_length - len(host) - 3
    if len(path) > available:
        return host + path[:available] + "..."
    return host + path


def export_filename(prefix: str = "export", extension: str = "csv", now: Optional[datetime] = None) -> str:
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return f"{prefix}-{moment.strftime('%Y-%m-%d-%H-%M-%S')}.{extension}"

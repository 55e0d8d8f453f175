"""
Raster chart surfaces for image export.
"""
from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from PIL import Image

from redirect_analytics.modules.dashboard.domain.models import BarSeries, DistributionSeries, TimeSeries
from redirect_analytics.modules.dashboard.pipeline.time_series import fill_missing_days
from redirect_analytics.modules.dashboard.utils.formatting import format_url_label
from redirect_analytics.modules.dashboard.utils.palette import LINE_COLOR


DEFAULT_SIZE = (1200, 600)
DPI = 100


@dataclass(frozen=True)
class ChartSurface:
    image: Optional[Image.Image]
    title: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.image is not None and self.image.width > 0 and self.image.height > 0


def _new_figure(size: Tuple[int, int]):
    width, height = size
    return plt.subplots(figsize=(width / DPI, height / DPI), dpi=DPI)


def _to_image(fig) -> Image.Image:
    buffer = BytesIO()
    fig.savefig(buffer, format='png', dpi=DPI)
    plt.close(fig)
    buffer.seek(0)
    with Image.open(buffer) as rendered:
        return rendered.convert("RGBA")


def _empty_state(ax, message: str = "No data available") -> None:
    ax.text(0.5, 0.5, message, ha='center', va='center', fontsize=14, color='gray', transform=ax.transAxes)
    ax.set_axis_off()


def render_line_chart(series: TimeSeries, title: str = "Redirections over time", size: Tuple[int, int] = DEFAULT_SIZE) -> ChartSurface:
    """
    Render daily redirection counts as a line chart.

    Days without events between the first and last bucket are drawn as
    zeros.
    """
    fig, ax = _new_figure(size)
    buckets = fill_missing_days(series.buckets)

    if not buckets:
        _empty_state(ax)
    else:
        dates = [bucket.date_key for bucket in buckets]
        values = [bucket.count for bucket in buckets]
        ax.plot(dates, values, marker='o', label='Redirections', color=LINE_COLOR, linewidth=2)
        ax.fill_between(dates, values, color=LINE_COLOR, alpha=0.1)
        ax.set_xlabel('Date')
        ax.set_ylabel('Count')
        ax.legend()
        ax.grid(True, alpha=0.3)
        fig.autofmt_xdate(rotation=45, ha='right')

    ax.set_title(title, fontsize=14, fontweight='bold')
    fig.tight_layout()
    return ChartSurface(image=_to_image(fig))


def render_pie_chart(series: DistributionSeries, title: str = "Destination distribution", size: Tuple[int, int] = DEFAULT_SIZE) -> ChartSurface:
    fig, ax = _new_figure(size)

    if series.is_empty:
        _empty_state(ax)
    else:
        counts = [item.raw_count for item in series.slices]
        labels = [
            f"{format_url_label(item.label)} ({item.share_percent:.1f}%)"
            for item in series.slices
        ]
        ax.pie(counts, colors=list(series.colors), startangle=90, counterclock=False,
               wedgeprops={'edgecolor': 'white', 'linewidth': 1})
        ax.axis('equal')
        ax.legend(labels, loc='center left', bbox_to_anchor=(1.0, 0.5), fontsize=9)

    ax.set_title(title, fontsize=14, fontweight='bold')
    fig.tight_layout()
    return ChartSurface(image=_to_image(fig))


def render_bar_chart(series: BarSeries, title: str = "Redirections by source", size: Tuple[int, int] = DEFAULT_SIZE) -> ChartSurface:
    fig, ax = _new_figure(size)

    if series.is_empty:
        _empty_state(ax)
    else:
        positions = list(range(len(series.labels)))
        width = 0.4
        ax.bar([p - width / 2 for p in positions], series.counts, width,
               label='Redirections', color=list(series.colors))
        ax.bar([p + width / 2 for p in positions], series.unique_clients, width,
               label='Unique IPs', color=list(series.companion_colors))
        ax.set_xticks(positions)
        ax.set_xticklabels(series.labels, rotation=45, ha='right')
        ax.set_ylabel('Count')
        ax.legend()
        ax.grid(True, axis='y', alpha=0.3)

    ax.set_title(title, fontsize=14, fontweight='bold')
    fig.tight_layout()
    return ChartSurface(image=_to_image(fig))

"""
Categorical distributions over aggregate records.

Destination totals fan a source's full count out to every destination it
lists. A source that lists two destinations therefore contributes its count
twice; slice totals can exceed the sum of source counts.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from redirect_analytics.modules.dashboard.domain.models import (
    OTHERS_LABEL,
    AggregateRecord,
    BarSeries,
    CategorySlice,
    DistributionSeries,
)
from redirect_analytics.modules.dashboard.utils.palette import (
    BAR_PALETTE,
    COMPANION_ALPHA,
    PIE_PALETTE,
    assign_colors,
    with_alpha,
)


DEFAULT_TOP_K = 10


def destination_totals(aggregates: Iterable[AggregateRecord]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for record in aggregates:
        for destination in record.destinations:
            totals[destination] = totals.get(destination, 0) + record.count
    return totals


def build_distribution(aggregates: Iterable[AggregateRecord], top_k: int = DEFAULT_TOP_K) -> List[CategorySlice]:
    """
    Rank destinations by total count and fold the tail into ``Others``.

    Args:
        aggregates: Aggregate records with their destination lists
        top_k: Number of named slices to keep

    Returns:
        Up to ``top_k`` named slices in descending count order (ties by
        label), followed by one overflow slice when more destinations
        exist. Empty when there is nothing to distribute.
    """
    if top_k < 1:
        raise ValueError("top_k must be a positive integer")

    totals = destination_totals(aggregates)
    grand_total = sum(totals.values())
    if not totals or grand_total == 0:
        return []

    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    head, tail = ranked[:top_k], ranked[top_k:]

    slices = [
        CategorySlice(label=label, raw_count=count, share_percent=count * 100 / grand_total)
        for label, count in head
    ]
    if tail:
        others = sum(count for _, count in tail)
        slices.append(
            CategorySlice(
                label=OTHERS_LABEL,
                raw_count=others,
                share_percent=others * 100 / grand_total,
                is_overflow=True,
            )
        )
    return slices


def build_distribution_series(
    aggregates: Iterable[AggregateRecord],
    top_k: int = DEFAULT_TOP_K,
) -> DistributionSeries:
    slices = build_distribution(aggregates, top_k=top_k)
    return DistributionSeries(slices=tuple(slices), colors=assign_colors(len(slices), PIE_PALETTE))


def drilldown_target(item: CategorySlice) -> Optional[str]:
    """Destination to drill into for a clicked slice; None for the overflow slice."""
    if item.is_overflow:
        return None
    return item.label


def rank_sources(aggregates: Iterable[AggregateRecord]) -> List[AggregateRecord]:
    # stable: equal counts keep API order
    return sorted(aggregates, key=lambda record: record.count, reverse=True)


def build_bar_series(aggregates: Iterable[AggregateRecord]) -> BarSeries:
    ranked = rank_sources(aggregates)
    colors = assign_colors(len(ranked), BAR_PALETTE)
    return BarSeries(
        labels=tuple(record.display_source for record in ranked),
        counts=tuple(record.count for record in ranked),
        unique_clients=tuple(record.unique_client_count for record in ranked),
        colors=colors,
        companion_colors=tuple(with_alpha(color, COMPANION_ALPHA) for color in colors),
    )

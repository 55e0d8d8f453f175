"""
Unwrapping of API payloads into dashboard records.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from redirect_analytics.modules.dashboard.domain.models import AggregateRecord, TrackingEvent

logger = logging.getLogger(__name__)


def _unwrap_events(payload: Any) -> Any:
    # {"data": {"events": [...], "total_count": n, "has_more": bool}}
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, Mapping):
            return data.get("events")
        return data
    return payload


def _unwrap_aggregates(payload: Any) -> Any:
    # {"data": [...], "timestamp": "..."}
    if isinstance(payload, Mapping):
        return payload.get("data")
    return payload


def _mappings(items: Any, kind: str) -> Iterable[Mapping[str, Any]]:
    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning("Expected a list of %s, got %s; treating as empty", kind, type(items).__name__)
        return []
    valid = []
    for position, item in enumerate(items):
        if not isinstance(item, Mapping):
            logger.warning("Skipping %s entry %d: expected object, got %s", kind, position, type(item).__name__)
            continue
        valid.append(item)
    return valid


def parse_events(payload: Any) -> List[TrackingEvent]:
    return [TrackingEvent.from_payload(item) for item in _mappings(_unwrap_events(payload), "event")]


def parse_aggregates(payload: Any) -> List[AggregateRecord]:
    return [AggregateRecord.from_payload(item) for item in _mappings(_unwrap_aggregates(payload), "aggregate")]

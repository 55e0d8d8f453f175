"""
Domain models for the dashboard module.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from redirect_analytics.modules.dashboard.utils.coercion import as_int, as_text, as_text_list


UNKNOWN_SOURCE = "Unknown"
OTHERS_LABEL = "Others"
NO_DATA_LABEL = "No data"

FILTERABLE_FIELDS = ("source_attribution", "destination_url", "client_address")
SORTABLE_KEYS = (
    "event_id",
    "occurred_at",
    "source_attribution",
    "destination_url",
    "client_address",
    "ttl_seconds",
)


@dataclass(frozen=True)
class TrackingEvent:
    event_id: str
    timestamp: str
    source_attribution: str
    destination_url: str
    client_address: str
    ttl_seconds: int = 0
    formatted_timestamp: str = ""

    @property
    def display_source(self) -> str:
        return self.source_attribution or UNKNOWN_SOURCE

    @property
    def display_timestamp(self) -> str:
        return self.formatted_timestamp or self.timestamp

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TrackingEvent":
        """
        Build an event from the API wire shape.

        Missing or mistyped fields degrade per field instead of failing
        the whole record.
        """
        return cls(
            event_id=as_text(payload.get("tracking_id"), field_name="tracking_id"),
            timestamp=as_text(payload.get("timestamp"), field_name="timestamp"),
            source_attribution=as_text(payload.get("source_attribution"), field_name="source_attribution"),
            destination_url=as_text(payload.get("destination_url"), field_name="destination_url"),
            client_address=as_text(payload.get("client_ip"), field_name="client_ip"),
            ttl_seconds=as_int(payload.get("ttl"), field_name="ttl", minimum=0),
            formatted_timestamp=as_text(payload.get("formatted_timestamp"), field_name="formatted_timestamp"),
        )


@dataclass(frozen=True)
class AggregateRecord:
    source_attribution: str
    count: int
    unique_client_count: int
    destinations: Tuple[str, ...] = ()

    @property
    def display_source(self) -> str:
        return self.source_attribution or UNKNOWN_SOURCE

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AggregateRecord":
        return cls(
            source_attribution=as_text(payload.get("source_attribution"), field_name="source_attribution"),
            count=as_int(payload.get("count"), field_name="count", minimum=0),
            unique_client_count=as_int(payload.get("unique_ips"), field_name="unique_ips", minimum=0),
            destinations=as_text_list(payload.get("destinations"), field_name="destinations"),
        )


@dataclass(frozen=True)
class FilterSpec:
    global_term: str = ""
    per_field: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return bool(self.global_term) or any(self.per_field.values())

    def with_field(self, name: str, term: str) -> "FilterSpec":
        if name not in FILTERABLE_FIELDS:
            raise ValueError(f"Unknown filter field: {name}")
        terms = dict(self.per_field)
        terms[name] = term
        return replace(self, per_field=terms)

    def with_global_term(self, term: str) -> "FilterSpec":
        return replace(self, global_term=term)


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: SortDirection = SortDirection.ASCENDING

    def __post_init__(self) -> None:
        if self.key not in SORTABLE_KEYS:
            raise ValueError(f"Unknown sort key: {self.key}")


@dataclass(frozen=True)
class PageSpec:
    size: int = 25
    index: int = 1

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("Page size must be a positive integer")
        if self.index < 1:
            raise ValueError("Page index is 1-based")


@dataclass(frozen=True)
class PageWindow:
    items: Tuple[TrackingEvent, ...]
    index: int
    size: int
    total_pages: int
    first_index: int
    last_index: int
    total_count: int

    @property
    def has_previous(self) -> bool:
        return self.index > 1

    @property
    def has_next(self) -> bool:
        return self.index < self.total_pages


@dataclass(frozen=True)
class TableView:
    items: Tuple[TrackingEvent, ...]
    total_count: int
    filtered_count: int
    page: PageWindow


@dataclass(frozen=True)
class TimeBucket:
    date_key: date
    count: int

    @property
    def label(self) -> str:
        return self.date_key.isoformat()


@dataclass(frozen=True)
class TimeSeries:
    buckets: Tuple[TimeBucket, ...]

    @property
    def labels(self) -> list[str]:
        return [bucket.label for bucket in self.buckets]

    @property
    def counts(self) -> list[int]:
        return [bucket.count for bucket in self.buckets]

    @property
    def total(self) -> int:
        return sum(bucket.count for bucket in self.buckets)


@dataclass(frozen=True)
class CategorySlice:
    label: str
    raw_count: int
    share_percent: float
    is_overflow: bool = False


@dataclass(frozen=True)
class DistributionSeries:
    slices: Tuple[CategorySlice, ...]
    colors: Tuple[str, ...]

    @property
    def labels(self) -> list[str]:
        return [item.label for item in self.slices]

    @property
    def total(self) -> int:
        return sum(item.raw_count for item in self.slices)

    @property
    def is_empty(self) -> bool:
        return not self.slices


@dataclass(frozen=True)
class BarSeries:
    labels: Tuple[str, ...]
    counts: Tuple[int, ...]
    unique_clients: Tuple[int, ...]
    colors: Tuple[str, ...]
    companion_colors: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.labels


@dataclass(frozen=True)
class KPISet:
    total_count: int
    total_unique_clients: int
    top_category_label: str
    top_category_count: int
    category_count: int
    average_per_category: int

    @classmethod
    def empty(cls) -> "KPISet":
        return cls(
            total_count=0,
            total_unique_clients=0,
            top_category_label=NO_DATA_LABEL,
            top_category_count=0,
            category_count=0,
            average_per_category=0,
        )


@dataclass(frozen=True)
class EventKPIs:
    unique_destinations: int
    unique_clients: int
    recent_count: int


@dataclass(frozen=True)
class FilterOptions:
    sources: Tuple[str, ...]
    destinations: Tuple[str, ...]


@dataclass(frozen=True)
class DashboardSnapshot:
    events: Tuple[TrackingEvent, ...]
    aggregates: Tuple[AggregateRecord, ...]
    fetched_at: datetime


@dataclass(frozen=True)
class DashboardView:
    table: TableView
    time_series: TimeSeries
    distribution: DistributionSeries
    bars: BarSeries
    kpis: KPISet
    event_kpis: EventKPIs
    filter_options: FilterOptions
    generated_at: Optional[datetime] = None

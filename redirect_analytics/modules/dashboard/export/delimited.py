"""
CSV serialization of events and aggregates.

Every cell is quoted and embedded quotes are doubled, whether or not the
value needs it.
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from redirect_analytics.modules.dashboard.domain.errors import NoExportableDataError
from redirect_analytics.modules.dashboard.domain.models import AggregateRecord, TrackingEvent


DESTINATION_SEPARATOR = "; "
SUMMARY_TAG = "Summary"
EVENT_TAG = "Event"
DATA_TYPE_LABEL = "Data Type"


@dataclass(frozen=True)
class Column:
    key: str
    label: str


@dataclass(frozen=True)
class ExportValidation:
    is_valid: bool
    message: Optional[str] = None


EVENT_COLUMNS = (
    Column("event_id", "Tracking ID"),
    Column("display_timestamp", "Timestamp"),
    Column("source_attribution", "Source Attribution"),
    Column("destination_url", "Destination URL"),
    Column("client_address", "Client IP"),
    Column("ttl_seconds", "TTL"),
)

AGGREGATE_COLUMNS = (
    Column("source_attribution", "Source Attribution"),
    Column("count", "Total Count"),
    Column("unique_client_count", "Unique IPs"),
    Column("destinations", "Destinations"),
)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return DESTINATION_SEPARATOR.join(cell_text(item) for item in value)
    return str(value)


def _value(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _writer(buffer: io.StringIO) -> Any:
    return csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")


def to_delimited_text(records: Iterable[Any], columns: Sequence[Column]) -> str:
    """
    Serialize records under a fixed header.

    Args:
        records: Dataclass instances or mappings
        columns: Column keys and header labels, in output order

    Returns:
        CSV text; just the header row when there are no records
    """
    buffer = io.StringIO()
    writer = _writer(buffer)
    writer.writerow([column.label for column in columns])
    for record in records:
        writer.writerow([cell_text(_value(record, column.key)) for column in columns])
    return buffer.getvalue()


def validate_export_data(records: Any) -> ExportValidation:
    if not isinstance(records, (list, tuple)):
        return ExportValidation(is_valid=False, message="Data must be a list")
    if not records:
        return ExportValidation(is_valid=False, message="No data available to export")
    return ExportValidation(is_valid=True)


def _require(records: Sequence[Any]) -> None:
    validation = validate_export_data(records)
    if not validation.is_valid:
        raise NoExportableDataError(validation.message or "No data available to export")


def events_to_csv(events: Sequence[TrackingEvent]) -> str:
    _require(events)
    return to_delimited_text(events, EVENT_COLUMNS)


def aggregates_to_csv(aggregates: Sequence[AggregateRecord]) -> str:
    _require(aggregates)
    return to_delimited_text(aggregates, AGGREGATE_COLUMNS)


def combined_to_csv(events: Sequence[TrackingEvent], aggregates: Sequence[AggregateRecord]) -> str:
    """
    Serialize a summary block of aggregates followed by a detail block of
    events, separated by one blank row.

    Both blocks lead with a ``Data Type`` column tagged ``Summary`` or
    ``Event``. Fails only when both inputs are empty.
    """
    if not events and not aggregates:
        raise NoExportableDataError()

    buffer = io.StringIO()
    writer = _writer(buffer)

    writer.writerow([DATA_TYPE_LABEL] + [column.label for column in AGGREGATE_COLUMNS])
    for record in aggregates:
        writer.writerow([SUMMARY_TAG] + [cell_text(_value(record, column.key)) for column in AGGREGATE_COLUMNS])

    writer.writerow([])

    writer.writerow([DATA_TYPE_LABEL] + [column.label for column in EVENT_COLUMNS])
    for event in events:
        writer.writerow([EVENT_TAG] + [cell_text(_value(event, column.key)) for column in EVENT_COLUMNS])

    return buffer.getvalue()
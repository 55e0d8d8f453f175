"""
Tests for payload parsing, field coercion and timestamp parsing.
"""
import logging
from datetime import UTC, date, datetime, timedelta, timezone

from redirect_analytics.modules.dashboard.domain.models import AggregateRecord, TrackingEvent
from redirect_analytics.modules.dashboard.export.delimited import aggregates_to_csv
from redirect_analytics.modules.dashboard.pipeline.distribution import build_distribution
from redirect_analytics.modules.dashboard.utils.coercion import as_int, as_text, as_text_list
from redirect_analytics.modules.dashboard.utils.payloads import parse_aggregates, parse_events
from redirect_analytics.modules.dashboard.utils.timestamps import parse_timestamp, utc_date_key


EVENT_PAYLOAD = {
    "tracking_id": "trk-1",
    "timestamp": "2024-01-01T08:00:00Z",
    "formatted_timestamp": "Jan 1, 2024",
    "source_attribution": "google.com",
    "destination_url": "https://example.com",
    "client_ip": "10.0.0.1",
    "ttl": 3600,
}


class TestCoercion:
    """Test lenient field coercion."""

    def test_as_text(self, caplog):
        """Test null and non-string values."""
        assert as_text(None) == ""
        assert as_text("x") == "x"
        with caplog.at_level(logging.WARNING):
            assert as_text(42, field_name="tracking_id") == "42"
        assert "tracking_id" in caplog.text

    def test_as_int(self):
        """Test numeric coercion rules."""
        assert as_int(None) == 0
        assert as_int(7) == 7
        assert as_int(" 12 ") == 12
        assert as_int(3.9) == 3
        assert as_int("abc") == 0
        assert as_int(True) == 0
        assert as_int(float("nan")) == 0
        assert as_int(-5, minimum=0) == 0

    def test_as_text_list(self, caplog):
        """Test list coercion skips nulls and keeps repeated entries."""
        assert as_text_list(None) == ()
        assert as_text_list("https://a") == ()
        with caplog.at_level(logging.WARNING):
            assert as_text_list(["a", None, "b", "a", 3], field_name="destinations") == ("a", "b", "a", "3")
        assert "null entry" in caplog.text
        assert "more than once" in caplog.text


class TestRecordParsing:
    """Test records built from wire payloads."""

    def test_event_from_payload(self):
        """Test wire key mapping."""
        event = TrackingEvent.from_payload(EVENT_PAYLOAD)
        assert event == TrackingEvent(
            event_id="trk-1",
            timestamp="2024-01-01T08:00:00Z",
            source_attribution="google.com",
            destination_url="https://example.com",
            client_address="10.0.0.1",
            ttl_seconds=3600,
            formatted_timestamp="Jan 1, 2024",
        )
        assert event.display_timestamp == "Jan 1, 2024"

    def test_event_with_missing_fields(self):
        """Test that a sparse record degrades per field."""
        event = TrackingEvent.from_payload({"tracking_id": 5, "ttl": "soon"})
        assert event.event_id == "5"
        assert event.ttl_seconds == 0
        assert event.source_attribution == ""
        assert event.display_source == "Unknown"
        assert event.display_timestamp == ""

    def test_aggregate_from_payload(self):
        """Test aggregate wire key mapping."""
        record = AggregateRecord.from_payload({
            "source_attribution": "google.com",
            "count": "150",
            "unique_ips": 75,
            "destinations": ["a", "b"],
        })
        assert record == AggregateRecord("google.com", 150, 75, ("a", "b"))

    def test_repeated_destinations_kept(self, caplog):
        """Test every listed destination survives parsing and export."""
        with caplog.at_level(logging.WARNING):
            record = AggregateRecord.from_payload({"count": 10, "destinations": ["a", "a", "b"]})
        assert record.destinations == ("a", "a", "b")
        assert sum(item.raw_count for item in build_distribution([record])) == 30
        assert aggregates_to_csv([record]).splitlines()[1].endswith('"a; a; b"')
        assert len([r for r in caplog.records if "more than once" in r.getMessage()]) == 1

    def test_parse_event_envelope(self, caplog):
        """Test the events envelope and skipping of non-objects."""
        payload = {"data": {"events": [EVENT_PAYLOAD, "junk"], "total_count": 2, "has_more": False}}
        with caplog.at_level(logging.WARNING):
            events = parse_events(payload)
        assert [event.event_id for event in events] == ["trk-1"]
        assert "Skipping event entry 1" in caplog.text

    def test_parse_bare_lists_and_missing_data(self):
        """Test bare lists and absent envelopes."""
        assert len(parse_events([EVENT_PAYLOAD])) == 1
        assert parse_events({"data": None}) == []
        assert parse_events(None) == []
        assert parse_aggregates({"data": "oops"}) == []

    def test_parse_aggregate_envelope(self):
        """Test the aggregates envelope."""
        payload = {
            "data": [{"source_attribution": "x", "count": 1, "unique_ips": 1, "destinations": []}],
            "timestamp": "2024-01-01T00:00:00Z",
        }
        assert parse_aggregates(payload) == [AggregateRecord("x", 1, 1, ())]


class TestTimestamps:
    """Test timestamp parsing."""

    def test_iso_with_zulu(self):
        """Test a trailing Z."""
        assert parse_timestamp("2024-01-01T08:00:00Z") == datetime(2024, 1, 1, 8, tzinfo=UTC)

    def test_offset_converted_to_utc(self):
        """Test conversion of offsets."""
        parsed = parse_timestamp("2024-01-01T23:30:00-02:00")
        assert parsed == datetime(2024, 1, 2, 1, 30, tzinfo=UTC)
        assert utc_date_key(parsed) == date(2024, 1, 2)

    def test_naive_values_are_utc(self):
        """Test naive strings and datetimes."""
        assert parse_timestamp("2024-01-01T08:00:00") == datetime(2024, 1, 1, 8, tzinfo=UTC)
        assert parse_timestamp(datetime(2024, 1, 1, 8)).tzinfo is not None

    def test_aware_datetime(self):
        """Test an aware datetime keeps its instant."""
        moment = datetime(2024, 1, 1, 8, tzinfo=timezone(timedelta(hours=3)))
        assert parse_timestamp(moment) == datetime(2024, 1, 1, 5, tzinfo=UTC)

    def test_rfc2822_dates(self):
        """Test HTTP-style date strings."""
        assert parse_timestamp("Mon, 01 Jan 2024 08:00:00 GMT") == datetime(2024, 1, 1, 8, tzinfo=UTC)
        assert parse_timestamp("Mon, 01 Jan 2024 23:30:00 -0200") == datetime(2024, 1, 2, 1, 30, tzinfo=UTC)

    def test_invalid_values(self):
        """Test that invalid values give None."""
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("2024-13-01T00:00:00Z") is None
        assert parse_timestamp(1704096000) is None
        assert parse_timestamp(None) is None

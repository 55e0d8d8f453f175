"""
Tests for time series, distribution and bar series builders.
"""
import logging
from datetime import date

import pytest

from redirect_analytics.modules.dashboard.domain.models import (
    OTHERS_LABEL,
    AggregateRecord,
    TimeBucket,
    TrackingEvent,
)
from redirect_analytics.modules.dashboard.pipeline.distribution import (
    build_bar_series,
    build_distribution,
    build_distribution_series,
    destination_totals,
    drilldown_target,
)
from redirect_analytics.modules.dashboard.pipeline.options import build_filter_options
from redirect_analytics.modules.dashboard.pipeline.time_series import (
    bucket_by_day,
    build_time_series,
    fill_missing_days,
)
from redirect_analytics.modules.dashboard.utils.palette import (
    BAR_PALETTE,
    PIE_PALETTE,
    assign_colors,
    with_alpha,
)


def event_at(event_id, timestamp):
    return TrackingEvent(
        event_id=event_id,
        timestamp=timestamp,
        source_attribution="google.com",
        destination_url="https://example.com",
        client_address="10.0.0.1",
    )


@pytest.fixture
def aggregates():
    return [
        AggregateRecord("google.com", 150, 75, ("a", "b")),
        AggregateRecord("facebook.com", 100, 50, ("a",)),
        AggregateRecord("twitter.com", 50, 25, ("a",)),
    ]


class TestTimeSeries:
    """Test daily bucketing."""

    def test_buckets_by_utc_day_ascending(self):
        """Test grouping and ordering."""
        events = [
            event_at("t3", "2024-01-02T09:00:00Z"),
            event_at("t1", "2024-01-01T08:00:00Z"),
            event_at("t2", "2024-01-01T12:00:00Z"),
        ]
        buckets = bucket_by_day(events)
        assert buckets == [
            TimeBucket(date(2024, 1, 1), 2),
            TimeBucket(date(2024, 1, 2), 1),
        ]
        assert [bucket.label for bucket in buckets] == ["2024-01-01", "2024-01-02"]

    def test_offset_timestamps_use_utc_date(self):
        """Test that the grouping key is the UTC date, not the local one."""
        buckets = bucket_by_day([event_at("t1", "2024-01-01T23:30:00-02:00")])
        assert buckets == [TimeBucket(date(2024, 1, 2), 1)]

    def test_invalid_timestamp_is_skipped_and_logged(self, caplog):
        """Test one bad record does not abort the series."""
        events = [event_at("bad", "yesterday"), event_at("ok", "2024-01-01T08:00:00Z")]
        with caplog.at_level(logging.WARNING, logger="redirect_analytics.modules.dashboard.pipeline.time_series"):
            series = build_time_series(events)

        assert series.counts == [1]
        assert series.total == 1
        diagnostics = [record for record in caplog.records if "Invalid timestamp" in record.getMessage()]
        assert len(diagnostics) == 1
        assert "yesterday" in diagnostics[0].getMessage()

    def test_all_invalid_timestamps(self, caplog):
        """Test a series made only of bad records."""
        events = [event_at("b1", "yesterday"), event_at("b2", ""), event_at("b3", "2024-02-30T00:00:00Z")]
        with caplog.at_level(logging.WARNING, logger="redirect_analytics.modules.dashboard.pipeline.time_series"):
            buckets = bucket_by_day(events)

        assert buckets == []
        assert sum(bucket.count for bucket in buckets) == 0
        diagnostics = [record for record in caplog.records if "Invalid timestamp" in record.getMessage()]
        assert len(diagnostics) == 3
        assert all(record.levelno == logging.WARNING for record in diagnostics)

    def test_empty_events(self):
        """Test that no events give an empty series."""
        assert build_time_series([]).buckets == ()

    def test_fill_missing_days(self):
        """Test zero-filling gaps between days."""
        buckets = [TimeBucket(date(2024, 1, 1), 2), TimeBucket(date(2024, 1, 4), 1)]
        filled = fill_missing_days(buckets)
        assert [bucket.count for bucket in filled] == [2, 0, 0, 1]
        assert fill_missing_days([]) == []

        widened = fill_missing_days(buckets, start=date(2023, 12, 31), end=date(2024, 1, 5))
        assert len(widened) == 6
        assert widened[0].count == 0


class TestDistribution:
    """Test categorical distribution with overflow."""

    def test_fan_out_totals(self, aggregates):
        """Test that each destination receives the full source count."""
        assert destination_totals(aggregates) == {"a": 300, "b": 150}

    def test_repeated_destination_counts_each_time(self):
        """Test a destination listed twice receives the count twice."""
        slices = build_distribution([AggregateRecord("s", 10, 1, ("a", "a", "b"))])
        assert [(item.label, item.raw_count) for item in slices] == [("a", 20), ("b", 10)]
        assert sum(item.raw_count for item in slices) == 30
        assert sum(item.share_percent for item in slices) == pytest.approx(100.0)

    def test_two_destinations(self, aggregates):
        """Test shares without an overflow slice."""
        slices = build_distribution(aggregates, top_k=10)
        assert [item.label for item in slices] == ["a", "b"]
        assert [item.raw_count for item in slices] == [300, 150]
        assert slices[0].share_percent == pytest.approx(66.67, abs=0.01)
        assert slices[1].share_percent == pytest.approx(33.33, abs=0.01)
        assert not any(item.is_overflow for item in slices)

    def test_overflow_slice(self):
        """Test twelve equal destinations fold the tail into Others."""
        records = [
            AggregateRecord(f"source-{i:02d}", 10, 1, (f"https://dest-{i:02d}.example",))
            for i in range(1, 13)
        ]
        slices = build_distribution(records, top_k=10)

        assert len(slices) == 11
        named, others = slices[:10], slices[10]
        assert [item.label for item in named] == [f"https://dest-{i:02d}.example" for i in range(1, 11)]
        assert all(item.raw_count == 10 for item in named)
        assert all(item.share_percent == pytest.approx(100 / 12) for item in named)

        assert others.label == OTHERS_LABEL
        assert others.is_overflow
        assert others.raw_count == 20
        assert others.share_percent == pytest.approx(200 / 12)
        assert sum(item.share_percent for item in slices) == pytest.approx(100.0)

        assert drilldown_target(others) is None
        assert drilldown_target(named[0]) == "https://dest-01.example"

    def test_ties_break_by_label(self):
        """Test deterministic ordering of equal totals."""
        records = [AggregateRecord("s", 5, 1, ("zeta", "alpha", "mid"))]
        assert [item.label for item in build_distribution(records)] == ["alpha", "mid", "zeta"]

    def test_empty_and_zero_totals(self):
        """Test empty state instead of an error."""
        assert build_distribution([]) == []
        assert build_distribution([AggregateRecord("s", 0, 0, ("a",))]) == []
        assert build_distribution([AggregateRecord("s", 10, 1, ())]) == []

    def test_top_k_must_be_positive(self, aggregates):
        """Test top_k validation."""
        with pytest.raises(ValueError):
            build_distribution(aggregates, top_k=0)

    def test_series_colors_follow_position(self, aggregates):
        """Test palette assignment by slice position."""
        series = build_distribution_series(aggregates)
        assert series.colors == PIE_PALETTE[:2]
        assert series.total == 450
        assert not series.is_empty


class TestBarSeries:
    """Test the source bar series."""

    def test_sources_ranked_by_count(self, aggregates):
        """Test descending order with companion values."""
        bars = build_bar_series(aggregates)
        assert bars.labels == ("google.com", "facebook.com", "twitter.com")
        assert bars.counts == (150, 100, 50)
        assert bars.unique_clients == (75, 50, 25)
        assert bars.colors == BAR_PALETTE[:3]
        assert bars.companion_colors[0] == with_alpha(BAR_PALETTE[0], 0.4)

    def test_ties_keep_input_order_and_empty_source_label(self):
        """Test stable ranking and the Unknown label."""
        records = [
            AggregateRecord("", 10, 1, ()),
            AggregateRecord("bing.com", 10, 1, ()),
            AggregateRecord("duck.com", 20, 2, ()),
        ]
        bars = build_bar_series(records)
        assert bars.labels == ("duck.com", "Unknown", "bing.com")

    def test_empty(self):
        """Test that no records give an empty series."""
        assert build_bar_series([]).is_empty


class TestPaletteAndOptions:
    """Test colour assignment and filter options."""

    def test_palette_cycles(self):
        """Test colours wrap around the palette."""
        colors = assign_colors(14, PIE_PALETTE)
        assert colors[12] == PIE_PALETTE[0]
        assert colors[13] == PIE_PALETTE[1]
        assert assign_colors(0) == ()

    def test_with_alpha(self):
        """Test alpha suffix."""
        assert with_alpha("#3b82f6", 0.4) == "#3b82f666"
        assert with_alpha("#3b82f6", 1) == "#3b82f6ff"

    def test_filter_options(self, aggregates):
        """Test distinct sorted sources and destinations."""
        events = [
            event_at("t1", "2024-01-01T08:00:00Z"),
            TrackingEvent("t2", "2024-01-01T08:00:00Z", "bing.com", "https://a.example", "10.0.0.2"),
            TrackingEvent("t3", "2024-01-01T08:00:00Z", "bing.com", "", "10.0.0.3"),
        ]
        options = build_filter_options(aggregates + [AggregateRecord("", 1, 1, ())], events)
        assert options.sources == ("facebook.com", "google.com", "twitter.com")
        assert options.destinations == ("https://a.example", "https://example.com")

"""
Tests for error classification and application settings.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from redirect_analytics.app.config import AppConfig
from redirect_analytics.modules.dashboard.domain.errors import (
    AnalyticsSourceError,
    ErrorCategory,
    ErrorSeverity,
    NoExportableDataError,
    SourceConnectionError,
    classify_error,
)


class TestClassifyError:
    """Test mapping of exceptions to user-facing errors."""

    def test_connection_error(self):
        """Test network failures are retryable."""
        processed = classify_error(SourceConnectionError("refused"), context="load_snapshot")
        assert processed.category is ErrorCategory.NETWORK
        assert processed.can_retry
        assert processed.context == "load_snapshot"
        assert processed.suggestions

    @pytest.mark.parametrize(
        "status, category, retry",
        [
            (400, ErrorCategory.VALIDATION, False),
            (401, ErrorCategory.AUTHENTICATION, False),
            (403, ErrorCategory.AUTHORIZATION, False),
            (404, ErrorCategory.CLIENT, False),
            (429, ErrorCategory.CLIENT, True),
            (503, ErrorCategory.SERVER, True),
            (None, ErrorCategory.UNKNOWN, False),
        ],
    )
    def test_status_codes(self, status, category, retry):
        """Test classification by HTTP-style status."""
        processed = classify_error(AnalyticsSourceError("failed", status_code=status))
        assert processed.category is category
        assert processed.can_retry is retry
        assert processed.status_code == status

    def test_export_failure(self):
        """Test export failures keep their message."""
        processed = classify_error(NoExportableDataError())
        assert processed.user_message == "No data available to export"
        assert processed.severity is ErrorSeverity.LOW
        assert not processed.can_retry

    def test_unexpected_error(self):
        """Test anything else is unknown."""
        processed = classify_error(RuntimeError())
        assert processed.category is ErrorCategory.UNKNOWN
        assert processed.message == "RuntimeError"


class TestAppConfig:
    """Test settings loading."""

    def test_defaults(self):
        """Test default values."""
        config = AppConfig(_env_file=None)
        assert config.page_size == 25
        assert config.top_destinations == 10
        assert config.recent_window_hours == 24
        assert config.chart_layout == "vertical"
        assert config.chart_size == (1200, 600)
        assert config.export_dir == Path("./data/exports")

    def test_environment(self, monkeypatch):
        """Test upper-case environment aliases."""
        monkeypatch.setenv("TOP_DESTINATIONS", "5")
        monkeypatch.setenv("CHART_LAYOUT", "grid")
        config = AppConfig(_env_file=None)
        assert config.top_destinations == 5
        assert config.chart_layout == "grid"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"PAGE_SIZE": 30},
            {"TOP_DESTINATIONS": 0},
            {"RECENT_WINDOW_HOURS": 1000},
            {"CHART_LAYOUT": "diagonal"},
            {"CHART_WIDTH": 100},
        ],
    )
    def test_invalid_values(self, overrides):
        """Test validation at load time."""
        with pytest.raises(ValidationError):
            AppConfig(_env_file=None, **overrides)

    def test_ensure_dirs(self, tmp_path: Path):
        """Test export directory creation."""
        config = AppConfig(_env_file=None, EXPORT_DIR=tmp_path / "out" / "exports")
        config.ensure_dirs()
        assert (tmp_path / "out" / "exports").is_dir()

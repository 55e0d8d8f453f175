"""
Error types for the dashboard module.

Field-level anomalies never reach these classes: they are substituted and
logged where they are found. What remains are failures of the data source
and of user-initiated exports, both of which the caller must report.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Optional, Tuple


class DashboardError(Exception):
    """Base exception for the dashboard module."""


class AnalyticsSourceError(DashboardError):
    """Raised when the analytics source cannot deliver a payload."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, retryable: bool = False) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class SourceConnectionError(AnalyticsSourceError):
    """The source was unreachable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class ExportFailure(DashboardError):
    """Raised when an export cannot produce an artifact."""


class NoExportableDataError(ExportFailure):
    def __init__(self, message: str = "No data available to export") -> None:
        super().__init__(message)


class NoExportableSurfacesError(ExportFailure):
    def __init__(self, message: str = "No valid charts available for export") -> None:
        super().__init__(message)


class UnsupportedExportError(ExportFailure):
    pass


class ErrorCategory(str, Enum):
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    SERVER = "server"
    CLIENT = "client"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ProcessedError:
    message: str
    user_message: str
    category: ErrorCategory
    severity: ErrorSeverity
    can_retry: bool
    suggestions: Tuple[str, ...] = ()
    status_code: Optional[int] = None
    context: Optional[str] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


_STATUS_RULES = {
    400: (
        ErrorCategory.VALIDATION,
        ErrorSeverity.MEDIUM,
        "Invalid request. Please check your input and try again.",
        ("Verify your input data", "Check date ranges and filters"),
        False,
    ),
    401: (
        ErrorCategory.AUTHENTICATION,
        ErrorSeverity.HIGH,
        "Authentication failed. Please check your API credentials.",
        ("Verify your API key", "Contact an administrator"),
        False,
    ),
    403: (
        ErrorCategory.AUTHORIZATION,
        ErrorSeverity.HIGH,
        "Access denied. You don't have permission to access this resource.",
        ("Contact an administrator for access",),
        False,
    ),
    404: (
        ErrorCategory.CLIENT,
        ErrorSeverity.MEDIUM,
        "The requested resource was not found.",
        ("Check the requested period", "Try refreshing the data"),
        False,
    ),
    429: (
        ErrorCategory.CLIENT,
        ErrorSeverity.MEDIUM,
        "Too many requests. Please wait a moment before trying again.",
        ("Wait a few seconds and retry",),
        True,
    ),
}


def classify_error(error: BaseException, context: Optional[str] = None) -> ProcessedError:
    """
    Turn any exception into a ProcessedError for the notification layer.

    Args:
        error: The exception raised by a fetch or export
        context: Optional label of the operation that failed

    Returns:
        Classified error with a user-facing message and retry hint
    """
    message = str(error) or type(error).__name__

    if isinstance(error, SourceConnectionError):
        return ProcessedError(
            message=message,
            user_message="Unable to reach the analytics service. Please check your connection.",
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.HIGH,
            can_retry=True,
            suggestions=("Check your internet connection", "Try again in a moment"),
            context=context,
        )

    if isinstance(error, AnalyticsSourceError):
        status = error.status_code
        if status in _STATUS_RULES:
            category, severity, user_message, suggestions, can_retry = _STATUS_RULES[status]
        elif status is not None and status >= 500:
            category, severity = ErrorCategory.SERVER, ErrorSeverity.HIGH
            user_message = "The analytics service is temporarily unavailable."
            suggestions = ("Try again in a few minutes",)
            can_retry = True
        else:
            category, severity = ErrorCategory.UNKNOWN, ErrorSeverity.MEDIUM
            user_message = "Failed to load analytics data."
            suggestions = ("Try refreshing the data",)
            can_retry = error.retryable
        return ProcessedError(
            message=message,
            user_message=user_message,
            category=category,
            severity=severity,
            can_retry=can_retry or error.retryable,
            suggestions=suggestions,
            status_code=status,
            context=context,
        )

    if isinstance(error, ExportFailure):
        return ProcessedError(
            message=message,
            user_message=message,
            category=ErrorCategory.CLIENT,
            severity=ErrorSeverity.LOW,
            can_retry=False,
            suggestions=("Load data before exporting",),
            context=context,
        )

    return ProcessedError(
        message=message,
        user_message="An unexpected error occurred.",
        category=ErrorCategory.UNKNOWN,
        severity=ErrorSeverity.MEDIUM,
        can_retry=False,
        context=context,
    )

"""Exception hierarchy for analytics engine failures."""

from __future__ import annotations

from typing import Any, Mapping


class AnalyticsError(Exception):
    """Base class for all errors raised by the analytics engine."""

    default_message = "Analytics error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class AccessorError(AnalyticsError):
    """Record accessor could not supply records."""

    default_message = "Record accessor error"


class AccessorUnavailableError(AccessorError):
    """Record source is down, throttled or unreachable."""

    default_message = "Record source is unavailable"


class RecordValidationError(AnalyticsError):
    """Raw record payload cannot be turned into a domain record."""

    default_message = "Record payload is invalid"


class ConfigurationError(AnalyticsError):
    """Raised when the engine is wired with inconsistent settings."""

    default_message = "Invalid analytics configuration"


class UnsupportedDimensionError(AnalyticsError):
    """Raised when an operation is asked for a dimension it cannot serve."""

    default_message = "Unsupported aggregation dimension"

"""Warm failures and expected drops.

Transport and render failures are counted and logged per item; resolution
misses and missing viewers are silent drops. None of them abort a batch.
"""

from typing import Any


class WarmerError(Exception):
    """Base exception for all warmer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize warmer error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportFailure(WarmerError):
    """Raised when a CDN warm request fails or returns an HTTP error status."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class RenderFailure(WarmerError):
    """Raised when rendering an item for a viewer variant fails."""

    pass


class ResolutionMiss(WarmerError):
    """Raised when an item no longer resolves or fails the final access check."""

    pass


class NoEligibleViewer(WarmerError):
    """Raised when no representative account can view an item for a variant."""

    pass


class StaleCursorError(WarmerError):
    """Raised when a cursor is not part of the current work set."""

    pass

"""Centralized error factory for the Roble SDK.

Provides consistent error creation from transport results and transport
exceptions across both clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from ..errors import (
    ApiRequestFailedError,
    AuthRefreshFailedError,
    RequestTimeoutError,
    RobleApiError,
)

if TYPE_CHECKING:
    from ..models import TransportResult


def extract_message(body: Any, status_code: int) -> str:
    """Extract a human-readable message from an error body.

    Args:
        body: Parsed response body.
        status_code: HTTP status code.

    Returns:
        The body's ``message`` or ``error`` field, or ``HTTP <status>``.
    """
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return f"HTTP {status_code}"


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def from_result(result: TransportResult) -> ApiRequestFailedError:
        """Create SDK error from a non-2xx transport result.

        Args:
            result: Completed HTTP exchange.

        Returns:
            ApiRequestFailedError carrying the extracted message.
        """
        return ApiRequestFailedError(
            extract_message(result.body, result.status_code),
            status_code=result.status_code,
            body=result.body,
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        timeout_ms: int | None = None,
    ) -> RobleApiError:
        """Create SDK error from a transport exception.

        Args:
            exc: Original exception.
            timeout_ms: Configured timeout, recorded on timeout errors.

        Returns:
            Appropriate RobleApiError subclass.
        """
        if isinstance(exc, RobleApiError):
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError(
                f"Request timed out: {exc}",
                timeout_ms=timeout_ms,
                cause=exc,
            )

        if isinstance(exc, httpx.HTTPError):
            return ApiRequestFailedError(str(exc) or type(exc).__name__, cause=exc)

        return ApiRequestFailedError(f"Unexpected error: {exc}", cause=exc)

    @staticmethod
    def refresh_failed(exc: Exception) -> AuthRefreshFailedError:
        """Wrap a failed refresh attempt.

        Args:
            exc: Error raised by the refresh routine.

        Returns:
            AuthRefreshFailedError carrying the refresh error's message.
        """
        reason = exc.message if isinstance(exc, RobleApiError) else str(exc)
        return AuthRefreshFailedError(reason, cause=exc)

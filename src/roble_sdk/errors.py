"""Error classes for the Roble SDK.

Every failure surfaced by the SDK is a ``RobleApiError``. Subclasses carry a
stable error code so callers can tell the failure kinds apart while still
catching the single base type.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Roble SDK."""

    # Session errors (1xxx)
    AUTH_REFRESH_FAILED = "AUTH_1001"
    NO_REFRESH_TOKEN = "AUTH_1002"
    INVALID_REFRESH_RESPONSE = "AUTH_1003"
    NO_ACTIVE_SESSION = "AUTH_1004"

    # Data errors (2xxx)
    INSERT_FAILED = "DATA_2001"

    # Request errors (3xxx)
    API_REQUEST_FAILED = "API_3001"
    REQUEST_TIMEOUT = "API_3002"

    # Configuration errors (4xxx)
    INVALID_CONFIG = "CFG_4001"


class RobleApiError(Exception):
    """Base error for the Roble SDK."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str = ErrorCode.API_REQUEST_FAILED,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class AuthRefreshFailedError(RobleApiError):
    """A 401 triggered a token refresh and the refresh itself failed."""

    def __init__(self, reason: str, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Access token expired and could not be refreshed: {reason}",
            ErrorCode.AUTH_REFRESH_FAILED,
            status_code=401,
            details={"reason": reason},
        )
        self.__cause__ = cause


class NoRefreshTokenError(RobleApiError):
    """A refresh was attempted with no refresh token stored."""

    def __init__(self, message: str = "No refresh token available") -> None:
        super().__init__(message, ErrorCode.NO_REFRESH_TOKEN)


class InvalidRefreshResponseError(RobleApiError):
    """The refresh call succeeded but returned no access token."""

    def __init__(self, message: str = "Invalid response while refreshing token") -> None:
        super().__init__(message, ErrorCode.INVALID_REFRESH_RESPONSE)


class NoActiveSessionError(RobleApiError):
    """Logout was attempted with no access token stored."""

    def __init__(self, message: str = "No active session to log out from") -> None:
        super().__init__(message, ErrorCode.NO_ACTIVE_SESSION)


class InsertFailedError(RobleApiError):
    """The insert response had neither an ``inserted`` list nor an object shape."""

    def __init__(
        self,
        message: str = "Could not insert the record",
        *,
        table_name: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INSERT_FAILED,
            details={"table_name": table_name} if table_name else None,
        )


class ApiRequestFailedError(RobleApiError):
    """Non-2xx response or transport failure."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if body is not None:
            details["body"] = body
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(
            message,
            ErrorCode.API_REQUEST_FAILED,
            status_code=status_code,
            details=details,
        )
        self.body = body
        self.__cause__ = cause


class RequestTimeoutError(ApiRequestFailedError):
    """Request exceeded the configured timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        timeout_ms: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.code = ErrorCode.REQUEST_TIMEOUT.value
        if timeout_ms is not None:
            self.details["timeout_ms"] = timeout_ms
        self.timeout_ms = timeout_ms


class InvalidConfigError(RobleApiError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )

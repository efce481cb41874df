"""Roble Python SDK."""

__version__ = "0.1.0"

from typing import Any

from .async_client import AsyncRobleClient
from .client import RobleClient
from .config import RobleConfig, TelemetryConfig, default_path_builder
from .errors import (
    ApiRequestFailedError,
    AuthRefreshFailedError,
    ErrorCode,
    InsertFailedError,
    InvalidConfigError,
    InvalidRefreshResponseError,
    NoActiveSessionError,
    NoRefreshTokenError,
    RequestTimeoutError,
    RobleApiError,
)
from .models import ColumnDefinition, HttpMethod, Kind, TokenPair
from .telemetry import configure_telemetry


def create_roble_client(config: RobleConfig | None = None, **kwargs: Any) -> AsyncRobleClient:
    """Create an async client from a config or from config keyword arguments."""
    return AsyncRobleClient(config or RobleConfig(**kwargs))


def create_sync_roble_client(config: RobleConfig | None = None, **kwargs: Any) -> RobleClient:
    """Create a sync client from a config or from config keyword arguments."""
    return RobleClient(config or RobleConfig(**kwargs))


__all__ = [
    "AsyncRobleClient",
    "RobleClient",
    "RobleConfig",
    "TelemetryConfig",
    "default_path_builder",
    "create_roble_client",
    "create_sync_roble_client",
    "configure_telemetry",
    "ColumnDefinition",
    "HttpMethod",
    "Kind",
    "TokenPair",
    "ErrorCode",
    "RobleApiError",
    "ApiRequestFailedError",
    "AuthRefreshFailedError",
    "InsertFailedError",
    "InvalidConfigError",
    "InvalidRefreshResponseError",
    "NoActiveSessionError",
    "NoRefreshTokenError",
    "RequestTimeoutError",
]

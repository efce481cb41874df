"""HTTP transport for the Roble SDK.

Builds the httpx clients and performs single request/response exchanges.
Non-2xx statuses never raise here: every completed exchange comes back as a
``TransportResult`` and the client pipeline classifies it. Only transport
failures (DNS, connection reset, timeout) raise, as ``RobleApiError``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx

from . import __version__
from .core.errors import ErrorFactory
from .models import TransportResult
from .telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from .config import RobleConfig
    from .models import PreparedRequest

USER_AGENT = f"roble-sdk/{__version__} Python"


def _client_options(config: RobleConfig) -> dict[str, Any]:
    return {
        "base_url": config.base_url,
        "timeout": httpx.Timeout(config.timeout_seconds),
        "headers": {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        "follow_redirects": False,
    }


def create_http_client(config: RobleConfig) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(**_client_options(config))


def create_async_http_client(config: RobleConfig) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(**_client_options(config))


def parse_body(response: httpx.Response) -> Any:
    """Parse a response body: JSON if possible, raw text otherwise, None if empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _to_result(request: PreparedRequest, response: httpx.Response) -> TransportResult:
    get_logger().debug(
        "roble_response",
        method=request.method.value,
        path=request.path,
        status_code=response.status_code,
    )
    return TransportResult(status_code=response.status_code, body=parse_body(response))


def send_request(
    client: httpx.Client,
    request: PreparedRequest,
    *,
    timeout_ms: int | None = None,
) -> TransportResult:
    """Send one request and return its result without judging the status.

    Args:
        client: HTTP client.
        request: Prepared request.
        timeout_ms: Configured timeout, reported on timeout errors.

    Returns:
        Transport result.

    Raises:
        ApiRequestFailedError: On transport failure.
        RequestTimeoutError: When the request times out.
    """
    with trace_operation(
        "http_request",
        attributes={"http.method": request.method.value, "http.url": request.path},
    ):
        try:
            response = client.request(
                request.method.value,
                request.path,
                headers=request.headers,
                content=request.content,
                params=request.params,
            )
        except httpx.HTTPError as e:
            get_logger().warning(
                "roble_transport_error",
                method=request.method.value,
                path=request.path,
                error=str(e),
            )
            raise ErrorFactory.from_exception(e, timeout_ms=timeout_ms) from e
        return _to_result(request, response)


async def async_send_request(
    client: httpx.AsyncClient,
    request: PreparedRequest,
    *,
    timeout_ms: int | None = None,
) -> TransportResult:
    """Send one async request and return its result without judging the status.

    Args:
        client: Async HTTP client.
        request: Prepared request.
        timeout_ms: Configured timeout, reported on timeout errors.

    Returns:
        Transport result.

    Raises:
        ApiRequestFailedError: On transport failure.
        RequestTimeoutError: When the request times out.
    """
    with trace_operation(
        "http_request",
        attributes={"http.method": request.method.value, "http.url": request.path},
    ):
        try:
            response = await client.request(
                request.method.value,
                request.path,
                headers=request.headers,
                content=request.content,
                params=request.params,
            )
        except httpx.HTTPError as e:
            get_logger().warning(
                "roble_transport_error",
                method=request.method.value,
                path=request.path,
                error=str(e),
            )
            raise ErrorFactory.from_exception(e, timeout_ms=timeout_ms) from e
        return _to_result(request, response)

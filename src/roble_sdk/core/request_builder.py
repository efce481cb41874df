"""Request preparation shared by the sync and async clients.

Turns a ``RequestSpec`` into a ``PreparedRequest``: resolves the path,
merges headers and encodes the body.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Mapping

from ..errors import ApiRequestFailedError
from ..models import PreparedRequest, RequestSpec

if TYPE_CHECKING:
    from ..config import RobleConfig
    from .token_store import TokenStore

JSON_CONTENT_TYPE = "application/json"


def _overlay(headers: dict[str, str], layer: Mapping[str, str] | None) -> None:
    """Apply a header layer in place; names compare case-insensitively."""
    for name, value in (layer or {}).items():
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value


def merge_headers(
    base: Mapping[str, str] | None,
    extra: Mapping[str, str] | None,
    access_token: str | None,
) -> dict[str, str]:
    """Merge request headers in precedence order.

    Content-Type first, then base headers, then caller headers, then the
    bearer header. Each layer replaces any earlier header of the same name,
    whatever its letter case, so a stored token always wins over a
    caller-supplied Authorization header.

    Args:
        base: Configured headers for the request kind.
        extra: Caller-supplied headers.
        access_token: Current access token, if any.

    Returns:
        Merged headers.
    """
    headers: dict[str, str] = {"Content-Type": JSON_CONTENT_TYPE}
    _overlay(headers, base)
    _overlay(headers, extra)

    if access_token:
        _overlay(headers, {"Authorization": f"Bearer {access_token}"})

    return headers


def encode_body(body: object) -> str | None:
    """Serialize a request body as JSON text.

    Raises:
        ApiRequestFailedError: If the body is not JSON-serializable.
    """
    if body is None:
        return None
    try:
        return json.dumps(body)
    except (TypeError, ValueError) as e:
        raise ApiRequestFailedError(
            f"Request body is not JSON-serializable: {e}", cause=e
        ) from e


class RequestBuilder:
    """Builds concrete requests from request specs."""

    def __init__(self, config: RobleConfig, tokens: TokenStore) -> None:
        """Initialize request builder.

        Args:
            config: Effective SDK configuration.
            tokens: Token store consulted for the bearer header.
        """
        self.config = config
        self._tokens = tokens

    def build(self, spec: RequestSpec) -> PreparedRequest:
        """Prepare a request with the currently stored access token.

        Called again for the retry after a refresh so that the resent
        request carries the new token.
        """
        return PreparedRequest(
            method=spec.method,
            path=self.config.build_path(spec.kind, spec.endpoint),
            headers=merge_headers(
                self.config.base_headers(spec.kind),
                spec.extra_headers,
                self._tokens.access_token,
            ),
            content=encode_body(spec.body),
            params=spec.query,
        )

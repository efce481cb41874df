"""Pydantic models for the Roble SDK.

Frozen models for the values that flow through the request pipeline:
the token pair, the per-call request description and the transport result.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

JSONValue: TypeAlias = dict[str, Any] | list[Any] | str | int | float | bool | None


class Kind(StrEnum):
    """API surface a request targets."""

    AUTH = "auth"
    DATABASE = "database"


class HttpMethod(StrEnum):
    """HTTP verbs used by the Roble API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class TokenPair(BaseModel):
    """Access and refresh token issued by login."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)


class RequestSpec(BaseModel):
    """Description of one logical API call."""

    model_config = ConfigDict(frozen=True)

    kind: Kind
    method: HttpMethod
    endpoint: str = Field(..., min_length=1)
    body: Any = None
    query: dict[str, str] | None = None
    extra_headers: dict[str, str] | None = None
    # True only for signup/login/refresh/logout
    is_auth_request: bool = False


class PreparedRequest(BaseModel):
    """Concrete request ready to hand to the transport."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    path: str
    headers: dict[str, str]
    content: str | None = None
    params: dict[str, str] | None = None


class TransportResult(BaseModel):
    """Status and parsed body of a completed HTTP exchange."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: Any = None

    @property
    def is_success(self) -> bool:
        """Check if status is 2xx."""
        return 200 <= self.status_code < 300

    @property
    def is_unauthorized(self) -> bool:
        """Check if status is 401."""
        return self.status_code == 401


class ColumnDefinition(BaseModel):
    """Column of a table created with ``create_table``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    nullable: bool | None = None
    default: Any = None

    def to_payload(self) -> dict[str, Any]:
        """Convert to the wire shape, omitting unset fields."""
        return self.model_dump(exclude_none=True)

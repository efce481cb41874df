"""Configuration for the Roble SDK.

Uses Pydantic v2 frozen models: the effective configuration is resolved once
at construction time and never mutated afterwards.
"""

from __future__ import annotations

from typing import Annotated, Any, Callable, ClassVar, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .errors import InvalidConfigError
from .models import Kind

PathBuilder = Callable[[Kind, str, str], str]


def default_path_builder(kind: Kind, endpoint: str, code_url: str) -> str:
    """Map (kind, endpoint, code_url) to the default Roble path.

    Args:
        kind: API surface of the request.
        endpoint: Endpoint name, e.g. ``login`` or ``read``.
        code_url: Application identifier.

    Returns:
        ``/auth/{code_url}/{endpoint}`` or ``/database/{code_url}/{endpoint}``.
    """
    if Kind(kind) is Kind.AUTH:
        return f"/auth/{code_url}/{endpoint}"
    return f"/database/{code_url}/{endpoint}"


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "roble-sdk"
    log_level: str = "INFO"


class RobleConfig(BaseModel):
    """Effective configuration of one Roble client."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    DEFAULT_TIMEOUT_MS: ClassVar[int] = 30_000

    # Required
    base_url: str
    code_url: str = Field(..., min_length=1)

    # Base headers per API surface
    auth_headers: dict[str, str] = Field(default_factory=dict)
    data_headers: dict[str, str] = Field(default_factory=dict)

    timeout_ms: Annotated[int, Field(gt=0)] = DEFAULT_TIMEOUT_MS
    path_builder: PathBuilder | None = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidConfigError(
                f"Invalid configuration: {field}: {first.get('msg')}",
                field=field or None,
            ) from e

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slashes(cls, v: str) -> str:
        """Normalize base URL so it never ends with '/'."""
        return v.rstrip("/")

    def build_path(self, kind: Kind, endpoint: str) -> str:
        """Resolve the concrete request path for kind and endpoint."""
        builder = self.path_builder or default_path_builder
        return builder(kind, endpoint, self.code_url)

    def base_headers(self, kind: Kind) -> dict[str, str]:
        """Get the configured base headers for an API surface."""
        return self.auth_headers if Kind(kind) is Kind.AUTH else self.data_headers

    @property
    def timeout_seconds(self) -> float:
        """Get timeout in seconds for the transport."""
        return self.timeout_ms / 1000

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "ROBLE_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        base_url = get_env("BASE_URL")
        if not base_url:
            msg = f"{prefix}BASE_URL environment variable is required"
            raise InvalidConfigError(msg, field="base_url")

        code_url = get_env("CODE_URL")
        if not code_url:
            msg = f"{prefix}CODE_URL environment variable is required"
            raise InvalidConfigError(msg, field="code_url")

        timeout_raw = get_env("TIMEOUT_MS", str(cls.DEFAULT_TIMEOUT_MS))
        try:
            timeout_ms = int(timeout_raw)
        except ValueError as e:
            msg = f"{prefix}TIMEOUT_MS must be an integer, got {timeout_raw!r}"
            raise InvalidConfigError(msg, field="timeout_ms") from e

        return cls(base_url=base_url, code_url=code_url, timeout_ms=timeout_ms)

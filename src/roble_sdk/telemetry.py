"""OpenTelemetry and structlog integration for the Roble SDK.

Every public client operation runs inside a ``roble.<operation>`` span and
every HTTP exchange inside an ``http_request`` span. Log events are
structured key/value records bound to the SDK name and version.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Awaitable, Callable, ParamSpec, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from . import __version__

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig

P = ParamSpec("P")
T = TypeVar("T")

SDK_NAME = "roble-sdk"

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Get the SDK tracer, creating a versioned one on first use."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, __version__)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get the SDK logger, bound to the SDK name and version."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SDK_NAME).bind(sdk=SDK_NAME, sdk_version=__version__)
    return _logger


def _level_number(name: str) -> int:
    levels = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}
    return levels.get(name.upper(), levels["INFO"])


def _json_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def configure_telemetry(config: TelemetryConfig) -> None:
    """Apply process-wide logging and tracing settings.

    With ``enabled=False`` spans go to a no-op tracer and structlog keeps
    whatever configuration the application installed.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=_json_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(config.log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, __version__)
    _logger = structlog.get_logger(config.service_name).bind(
        sdk=SDK_NAME,
        sdk_version=__version__,
    )


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span; failures mark the span as an error.

    Args:
        name: Span name.
        attributes: Optional span attributes.

    Yields:
        The active span.
    """
    with get_tracer().start_as_current_span(
        name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
            raise


def traced(name: str | None = None) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to trace a client method under a ``roble.<name>`` span."""

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        span_name = f"roble.{name or func.__name__}"

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with trace_operation(span_name):
                return func(*args, **kwargs)

        return wrapper

    return decorator


def traced_async(
    name: str | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator to trace an async client method under a ``roble.<name>`` span."""

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        span_name = f"roble.{name or func.__name__}"

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with trace_operation(span_name):
                return await func(*args, **kwargs)

        return wrapper

    return decorator

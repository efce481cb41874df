"""Core components for the Roble SDK.

Request building, token storage, operation definitions and error creation
shared between the sync and async clients.
"""

from __future__ import annotations

from .errors import ErrorFactory
from .operations import RobleOperations
from .request_builder import RequestBuilder
from .token_store import TokenStore

__all__ = [
    "ErrorFactory",
    "RobleOperations",
    "RequestBuilder",
    "TokenStore",
]

"""
Shared test fixtures for Roble SDK tests.

Provides configuration fixtures and clients wired to the scripted fake
backend by patching the HTTP client factories.
"""

from __future__ import annotations

from typing import Any, Iterator
from unittest.mock import patch

import httpx
import pytest

from roble_sdk.async_client import AsyncRobleClient
from roble_sdk.client import RobleClient
from roble_sdk.config import RobleConfig

from .fakes import BASE_URL, CODE_URL, FakeRoble


@pytest.fixture
def base_config() -> RobleConfig:
    """Provide a basic SDK configuration for testing."""
    return RobleConfig(
        base_url=f"{BASE_URL}/",
        code_url=CODE_URL,
        auth_headers={"x-app": "roble-auth"},
        data_headers={"x-app": "roble-data"},
    )


@pytest.fixture
def fake_roble() -> FakeRoble:
    return FakeRoble()


@pytest.fixture
def client(base_config: RobleConfig, fake_roble: FakeRoble) -> Iterator[RobleClient]:
    """Sync client talking to the fake backend."""
    http = httpx.Client(
        base_url=base_config.base_url,
        transport=httpx.MockTransport(fake_roble.handler),
    )
    with patch("roble_sdk.client.create_http_client", return_value=http):
        roble = RobleClient(base_config)
    yield roble
    roble.close()


@pytest.fixture
def async_client(base_config: RobleConfig, fake_roble: FakeRoble) -> AsyncRobleClient:
    """Async client talking to the fake backend."""
    http = httpx.AsyncClient(
        base_url=base_config.base_url,
        transport=httpx.MockTransport(fake_roble.handler),
    )
    with patch("roble_sdk.async_client.create_async_http_client", return_value=http):
        return AsyncRobleClient(base_config)


@pytest.fixture
def sample_login_response() -> dict[str, Any]:
    """Provide a sample login response."""
    return {
        "accessToken": "access-1",
        "refreshToken": "refresh-1",
        "user": {"email": "ada@example.com", "name": "Ada"},
    }

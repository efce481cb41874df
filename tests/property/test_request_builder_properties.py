"""
Property-based tests for request preparation.

Properties:
- Authorization is present iff an access token is stored
- When present it is always 'Bearer <token>', whatever the caller sends
- Content-Type is always application/json unless a caller overrides it
- Header names are unique ignoring case; later layers replace earlier ones
"""

from __future__ import annotations

import string

from hypothesis import given, settings, strategies as st

from roble_sdk.config import RobleConfig
from roble_sdk.core.request_builder import RequestBuilder, merge_headers
from roble_sdk.core.token_store import TokenStore
from roble_sdk.models import HttpMethod, Kind, RequestSpec, TokenPair

header_name = st.text(
    alphabet=string.ascii_letters + "-",
    min_size=1,
    max_size=20,
)
header_value = st.text(
    alphabet=string.ascii_letters + string.digits + " -_",
    max_size=40,
)
headers_strategy = st.dictionaries(header_name, header_value, max_size=5)
token_strategy = st.text(
    alphabet=string.ascii_letters + string.digits + ".-_",
    min_size=1,
    max_size=60,
)
authorization_key = st.sampled_from(["Authorization", "authorization", "AUTHORIZATION"])


class TestBearerHeaderProperties:
    """Property tests for the bearer header."""

    @given(
        base=headers_strategy,
        extra=headers_strategy,
        token=token_strategy,
        auth_key=authorization_key,
        caller_auth=header_value,
    )
    @settings(max_examples=100)
    def test_bearer_always_wins(
        self,
        base: dict[str, str],
        extra: dict[str, str],
        token: str,
        auth_key: str,
        caller_auth: str,
    ) -> None:
        """Property: a stored token overrides any caller Authorization header."""
        extra = {**extra, auth_key: caller_auth}

        headers = merge_headers(base, extra, token)

        auth_headers = {k: v for k, v in headers.items() if k.lower() == "authorization"}
        assert auth_headers == {"Authorization": f"Bearer {token}"}

    @given(base=headers_strategy, extra=headers_strategy)
    @settings(max_examples=100)
    def test_no_bearer_without_token(
        self,
        base: dict[str, str],
        extra: dict[str, str],
    ) -> None:
        """Property: without a token the SDK adds no Authorization header."""
        base = {k: v for k, v in base.items() if k.lower() != "authorization"}
        extra = {k: v for k, v in extra.items() if k.lower() != "authorization"}

        headers = merge_headers(base, extra, None)

        assert all(k.lower() != "authorization" for k in headers)

    @given(token=st.one_of(st.none(), token_strategy), kind=st.sampled_from(list(Kind)))
    @settings(max_examples=100)
    def test_builder_authorization_iff_token(self, token: str | None, kind: Kind) -> None:
        """Property: built requests carry Authorization iff a token is stored."""
        tokens = TokenStore()
        if token is not None:
            tokens.set_tokens(TokenPair(access_token=token, refresh_token="r"))
        builder = RequestBuilder(
            RobleConfig(base_url="https://roble.example.com", code_url="X"),
            tokens,
        )

        prepared = builder.build(
            RequestSpec(kind=kind, method=HttpMethod.GET, endpoint="read")
        )

        if token is None:
            assert "Authorization" not in prepared.headers
        else:
            assert prepared.headers["Authorization"] == f"Bearer {token}"
        assert prepared.headers["Content-Type"] == "application/json"


class TestHeaderOverlayProperties:
    """Property tests for layered header names."""

    @given(
        base=headers_strategy,
        extra=headers_strategy,
        token=st.one_of(st.none(), token_strategy),
    )
    @settings(max_examples=100)
    def test_names_unique_ignoring_case(
        self,
        base: dict[str, str],
        extra: dict[str, str],
        token: str | None,
    ) -> None:
        """Property: no header name appears twice in different letter case."""
        headers = merge_headers(base, extra, token)

        names = [k.lower() for k in headers]
        assert len(names) == len(set(names))

    @given(
        extra=headers_strategy,
        name=header_name,
        value=header_value,
        swap=st.sampled_from([str.lower, str.upper, str.title]),
    )
    @settings(max_examples=100)
    def test_later_layer_wins_whatever_case(
        self,
        extra: dict[str, str],
        name: str,
        value: str,
        swap,
    ) -> None:
        """Property: a caller header replaces a base header of the same name."""
        extra = {k: v for k, v in extra.items() if k.lower() != name.lower()}
        extra[swap(name)] = value

        headers = merge_headers({name: "base"}, extra, None)

        matching = {k: v for k, v in headers.items() if k.lower() == name.lower()}
        assert matching == {swap(name): value}

"""Token storage for a single Roble client session."""

from __future__ import annotations

from typing import Callable

from pydantic import ValidationError

from ..errors import InvalidConfigError
from ..models import TokenPair

TokenObserver = Callable[[str | None], None]


def to_token_pair(tokens: TokenPair | str, refresh_token: str | None = None) -> TokenPair:
    """Coerce a pair or two token strings into a validated ``TokenPair``.

    Raises:
        InvalidConfigError: If either token is missing or empty.
    """
    if isinstance(tokens, TokenPair):
        return tokens
    try:
        return TokenPair(access_token=tokens, refresh_token=refresh_token)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidConfigError(
            f"Invalid token pair: {field}: {first.get('msg')}",
            field=field or None,
        ) from e


class TokenStore:
    """Holds at most one access token and one refresh token.

    Both tokens are set together by ``set_tokens`` and cleared together by
    ``clear_tokens``. A refresh rewrites only the access token.

    ``on_token_update`` is a single slot: assigning a new observer replaces
    the previous one. It is called synchronously with the new access token
    (or ``None``) on every access-token write.
    """

    def __init__(self, on_token_update: TokenObserver | None = None) -> None:
        self._access_token: str | None = None
        self._refresh_token: str | None = None
        self.on_token_update = on_token_update

    @property
    def access_token(self) -> str | None:
        """Get current access token."""
        return self._access_token

    @property
    def refresh_token(self) -> str | None:
        """Get current refresh token."""
        return self._refresh_token

    def has_access_token(self) -> bool:
        """Check if an access token is stored."""
        return bool(self._access_token)

    def has_refresh_token(self) -> bool:
        """Check if a refresh token is stored."""
        return bool(self._refresh_token)

    def set_tokens(self, tokens: TokenPair) -> None:
        """Overwrite both tokens."""
        self._write_access_token(tokens.access_token)
        self._refresh_token = tokens.refresh_token

    def update_access_token(self, token: str) -> None:
        """Rewrite the access token after a refresh, keeping the refresh token."""
        self._write_access_token(token)

    def clear_tokens(self) -> None:
        """Drop both tokens."""
        self._write_access_token(None)
        self._refresh_token = None

    def _write_access_token(self, token: str | None) -> None:
        self._access_token = token
        if self.on_token_update is not None:
            self.on_token_update(token)

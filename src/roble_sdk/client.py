"""Synchronous Roble SDK client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Self

from .config import RobleConfig
from .core.errors import ErrorFactory
from .core.operations import RobleOperations
from .core.request_builder import RequestBuilder
from .core.token_store import TokenObserver, TokenStore, to_token_pair
from .errors import NoActiveSessionError, RobleApiError
from .http import create_http_client, send_request
from .models import TokenPair
from .telemetry import get_logger, traced

if TYPE_CHECKING:
    from .models import ColumnDefinition, RequestSpec, TransportResult


class RobleClient:
    """Synchronous Roble client with a single refresh-and-retry on 401.

    Not thread-safe: one client holds one session, and concurrent callers
    must serialize their calls.
    """

    def __init__(self, config: RobleConfig) -> None:
        """Initialize client.

        Args:
            config: SDK configuration.
        """
        self.config = config
        self._http = create_http_client(config)
        self._tokens = TokenStore()
        self._builder = RequestBuilder(config, self._tokens)
        self._logger = get_logger()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    # Tokens

    @property
    def on_token_update(self) -> TokenObserver | None:
        """Observer called with the new access token on every change.

        Assigning replaces the previous observer.
        """
        return self._tokens.on_token_update

    @on_token_update.setter
    def on_token_update(self, observer: TokenObserver | None) -> None:
        self._tokens.on_token_update = observer

    def get_access_token(self) -> str | None:
        return self._tokens.access_token

    def get_refresh_token(self) -> str | None:
        return self._tokens.refresh_token

    def set_tokens(
        self,
        tokens: TokenPair | str,
        refresh_token: str | None = None,
    ) -> None:
        """Inject a token pair, e.g. one restored from a previous session."""
        self._tokens.set_tokens(to_token_pair(tokens, refresh_token))

    def clear_tokens(self) -> None:
        self._tokens.clear_tokens()

    # Pipeline

    def _send(self, spec: RequestSpec) -> TransportResult:
        return send_request(
            self._http,
            self._builder.build(spec),
            timeout_ms=self.config.timeout_ms,
        )

    def _make_request(self, spec: RequestSpec) -> Any:
        """Send a request, refreshing the access token once on 401."""
        result = self._send(spec)
        if result.is_success:
            return result.body

        if (
            result.is_unauthorized
            and not spec.is_auth_request
            and self._tokens.has_refresh_token()
        ):
            self._logger.info(
                "roble_access_token_rejected",
                kind=spec.kind.value,
                endpoint=spec.endpoint,
            )
            try:
                self._refresh_access_token()
            except RobleApiError as e:
                raise ErrorFactory.refresh_failed(e) from e

            result = self._send(spec)
            if result.is_success:
                return result.body

        self._logger.warning(
            "roble_request_failed",
            kind=spec.kind.value,
            endpoint=spec.endpoint,
            status_code=result.status_code,
        )
        raise ErrorFactory.from_result(result)

    def _refresh_access_token(self) -> None:
        spec = RobleOperations.refresh(self._tokens.refresh_token)
        response = self._make_request(spec)
        self._tokens.update_access_token(
            RobleOperations.access_token_from_refresh(response)
        )
        self._logger.info("roble_access_token_refreshed")

    # Auth

    @traced()
    def register(self, name: str, email: str, password: str) -> Any:
        """Create a user account.

        Args:
            name: Display name.
            email: Account email.
            password: Account password.

        Returns:
            Raw signup response.
        """
        return self._make_request(RobleOperations.register(name, email, password))

    @traced()
    def login(self, email: str, password: str) -> Any:
        """Log in and store the returned token pair.

        Tokens are stored only when the response carries both an
        ``accessToken`` and a ``refreshToken``.

        Returns:
            Raw login response.
        """
        response = self._make_request(RobleOperations.login(email, password))
        tokens = RobleOperations.tokens_from_login(response)
        if tokens is not None:
            self._tokens.set_tokens(tokens)
            self._logger.info("roble_logged_in")
        return response

    @traced()
    def refresh_token_manual(self, refresh_token: str) -> Any:
        """Exchange an explicit refresh token; stored tokens are not touched."""
        return self._make_request(RobleOperations.refresh(refresh_token))

    @traced()
    def logout(self) -> None:
        """End the session and clear both tokens.

        Raises:
            NoActiveSessionError: If no access token is stored.
        """
        if not self._tokens.has_access_token():
            raise NoActiveSessionError()
        self._make_request(RobleOperations.logout())
        self._tokens.clear_tokens()
        self._logger.info("roble_logged_out")

    # Database

    @traced()
    def create_table(
        self,
        table_name: str,
        columns: Iterable[ColumnDefinition | Mapping[str, Any]],
        *,
        description: str | None = None,
    ) -> None:
        """Create a table with the given column definitions."""
        self._make_request(
            RobleOperations.create_table(table_name, columns, description)
        )

    @traced()
    def get_table_data(self, table_name: str) -> Any:
        """Get table metadata and contents from the public schema."""
        return self._make_request(RobleOperations.table_data(table_name))

    @traced()
    def create(self, table_name: str, record: Mapping[str, Any]) -> Any:
        """Insert a record.

        Returns:
            The inserted record, or the backend response when it is an
            object or a list.

        Raises:
            InsertFailedError: If the response is empty or a scalar.
        """
        response = self._make_request(RobleOperations.insert(table_name, record))
        return RobleOperations.inserted_record(response, table_name)

    @traced()
    def read(
        self,
        table_name: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows matching equality filters."""
        response = self._make_request(RobleOperations.read(table_name, filters))
        return RobleOperations.rows(response)

    @traced()
    def update(
        self,
        table_name: str,
        record_id: str | int,
        patch: Mapping[str, Any],
    ) -> Any:
        """Update a record by ``_id``; id fields in the patch are ignored."""
        return self._make_request(
            RobleOperations.update(table_name, record_id, patch)
        )

    @traced()
    def delete(self, table_name: str, record_id: str | int) -> Any:
        """Delete a record by ``_id``."""
        return self._make_request(RobleOperations.delete(table_name, record_id))

    def get_all(self, table_name: str) -> list[dict[str, Any]]:
        return self.read(table_name)

    def get_by_id(self, table_name: str, record_id: str | int) -> dict[str, Any] | None:
        return RobleOperations.first_row(self.read(table_name, {"_id": record_id}))

    def get_where(
        self,
        table_name: str,
        column: str,
        value: Any,
    ) -> list[dict[str, Any]]:
        return self.read(table_name, {column: value})

"""Centralized operation definitions for the Roble SDK.

Builds the request spec of every public operation and narrows the
responses whose shape varies. Shared by the sync and async clients so that
both only differ in how they wait on the network.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..errors import InsertFailedError, InvalidRefreshResponseError, NoRefreshTokenError
from ..models import ColumnDefinition, HttpMethod, Kind, RequestSpec, TokenPair

ID_COLUMN = "_id"
STRIPPED_UPDATE_FIELDS = frozenset({"_id", "id"})


def stringify_query_value(value: Any) -> str:
    """Render a filter value the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _auth(endpoint: str, body: Any = None) -> RequestSpec:
    return RequestSpec(
        kind=Kind.AUTH,
        method=HttpMethod.POST,
        endpoint=endpoint,
        body=body,
        is_auth_request=True,
    )


class RobleOperations:
    """Request specs and response handling for each API operation."""

    # Auth

    @staticmethod
    def register(name: str, email: str, password: str) -> RequestSpec:
        """Build signup request."""
        return _auth("signup-direct", {"name": name, "email": email, "password": password})

    @staticmethod
    def login(email: str, password: str) -> RequestSpec:
        """Build login request."""
        return _auth("login", {"email": email, "password": password})

    @staticmethod
    def refresh(refresh_token: str | None) -> RequestSpec:
        """Build refresh-token request.

        Raises:
            NoRefreshTokenError: If no refresh token is available.
        """
        if not refresh_token:
            raise NoRefreshTokenError()
        return _auth("refresh-token", {"refreshToken": refresh_token})

    @staticmethod
    def logout() -> RequestSpec:
        """Build logout request; identity travels in the bearer header."""
        return _auth("logout")

    @staticmethod
    def tokens_from_login(response: Any) -> TokenPair | None:
        """Extract the token pair from a login response, if both are present."""
        if not isinstance(response, dict):
            return None
        access_token = response.get("accessToken")
        refresh_token = response.get("refreshToken")
        if access_token and refresh_token:
            return TokenPair(access_token=access_token, refresh_token=refresh_token)
        return None

    @staticmethod
    def access_token_from_refresh(response: Any) -> str:
        """Extract the new access token from a refresh response.

        Raises:
            InvalidRefreshResponseError: If the response carries no access token.
        """
        token = response.get("accessToken") if isinstance(response, dict) else None
        if not token:
            raise InvalidRefreshResponseError()
        return str(token)

    # Database

    @staticmethod
    def create_table(
        table_name: str,
        columns: Iterable[ColumnDefinition | Mapping[str, Any]],
        description: str | None = None,
    ) -> RequestSpec:
        """Build create-table request."""
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.POST,
            endpoint="create-table",
            body={
                "tableName": table_name,
                "description": description
                or f"Table {table_name} created from the Roble SDK",
                "columns": [
                    c.to_payload() if isinstance(c, ColumnDefinition) else dict(c)
                    for c in columns
                ],
            },
        )

    @staticmethod
    def table_data(table_name: str) -> RequestSpec:
        """Build table-data request."""
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.GET,
            endpoint="table-data",
            query={"schema": "public", "table": table_name},
        )

    @staticmethod
    def insert(table_name: str, record: Mapping[str, Any]) -> RequestSpec:
        """Build insert request for a single record."""
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.POST,
            endpoint="insert",
            body={"tableName": table_name, "records": [dict(record)]},
        )

    @staticmethod
    def read(
        table_name: str,
        filters: Mapping[str, Any] | None = None,
    ) -> RequestSpec:
        """Build read request; filter values are stringified."""
        query = {"tableName": table_name}
        for key, value in (filters or {}).items():
            query[key] = stringify_query_value(value)
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.GET,
            endpoint="read",
            query=query,
        )

    @staticmethod
    def update(
        table_name: str,
        record_id: str | int,
        patch: Mapping[str, Any] | None,
    ) -> RequestSpec:
        """Build update request; ``_id`` and ``id`` are dropped from the patch."""
        updates = {
            k: v for k, v in (patch or {}).items() if k not in STRIPPED_UPDATE_FIELDS
        }
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.PUT,
            endpoint="update",
            body={
                "tableName": table_name,
                "idColumn": ID_COLUMN,
                "idValue": record_id,
                "updates": updates,
            },
        )

    @staticmethod
    def delete(table_name: str, record_id: str | int) -> RequestSpec:
        """Build delete request."""
        return RequestSpec(
            kind=Kind.DATABASE,
            method=HttpMethod.DELETE,
            endpoint="delete",
            body={"tableName": table_name, "idColumn": ID_COLUMN, "idValue": record_id},
        )

    # Response narrowing

    @staticmethod
    def inserted_record(response: Any, table_name: str | None = None) -> Any:
        """Narrow an insert response to the inserted record.

        Returns:
            The first ``inserted`` element (copied when it is an object), or
            the response itself when it is an object or a list.

        Raises:
            InsertFailedError: If the response is empty or a scalar.
        """
        if isinstance(response, dict):
            inserted = response.get("inserted")
            if isinstance(inserted, list) and inserted:
                first = inserted[0]
                return dict(first) if isinstance(first, dict) else first
            return response
        if isinstance(response, list):
            return response
        raise InsertFailedError(table_name=table_name)

    @staticmethod
    def rows(response: Any) -> list[dict[str, Any]]:
        """Narrow a read response to its rows; unknown shapes yield ``[]``."""
        if isinstance(response, list):
            return response
        if isinstance(response, dict):
            data = response.get("data")
            if isinstance(data, list):
                return data
        return []

    @staticmethod
    def first_row(rows: list[dict[str, Any]]) -> dict[str, Any] | None:
        """Get the first row or None."""
        return rows[0] if rows else None

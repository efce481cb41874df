"""Unit tests for operation specs and response narrowing."""

import pytest

from roble_sdk.core.operations import RobleOperations, stringify_query_value
from roble_sdk.errors import (
    ErrorCode,
    InsertFailedError,
    InvalidRefreshResponseError,
    NoRefreshTokenError,
)
from roble_sdk.models import ColumnDefinition, HttpMethod, Kind, TokenPair


class TestAuthSpecs:
    """Tests for auth request specs."""

    def test_register(self) -> None:
        spec = RobleOperations.register("Ada", "ada@example.com", "pw")

        assert spec.kind is Kind.AUTH
        assert spec.method is HttpMethod.POST
        assert spec.endpoint == "signup-direct"
        assert spec.body == {"name": "Ada", "email": "ada@example.com", "password": "pw"}
        assert spec.is_auth_request

    def test_login(self) -> None:
        spec = RobleOperations.login("ada@example.com", "pw")

        assert spec.endpoint == "login"
        assert spec.body == {"email": "ada@example.com", "password": "pw"}
        assert spec.is_auth_request

    def test_refresh_requires_token(self) -> None:
        with pytest.raises(NoRefreshTokenError) as exc_info:
            RobleOperations.refresh(None)

        assert exc_info.value.code == ErrorCode.NO_REFRESH_TOKEN

    def test_refresh(self) -> None:
        spec = RobleOperations.refresh("r1")

        assert spec.endpoint == "refresh-token"
        assert spec.body == {"refreshToken": "r1"}
        assert spec.is_auth_request

    def test_logout_has_no_body(self) -> None:
        spec = RobleOperations.logout()

        assert spec.endpoint == "logout"
        assert spec.body is None
        assert spec.is_auth_request


class TestTokenExtraction:
    def test_tokens_from_login(self) -> None:
        tokens = RobleOperations.tokens_from_login({"accessToken": "a", "refreshToken": "b"})

        assert tokens == TokenPair(access_token="a", refresh_token="b")

    @pytest.mark.parametrize(
        "response",
        [None, [], "ok", {"accessToken": "a"}, {"refreshToken": "b"}, {"accessToken": ""}],
    )
    def test_tokens_from_login_incomplete(self, response: object) -> None:
        assert RobleOperations.tokens_from_login(response) is None

    def test_access_token_from_refresh(self) -> None:
        assert RobleOperations.access_token_from_refresh({"accessToken": "new"}) == "new"

    @pytest.mark.parametrize("response", [None, {}, {"accessToken": None}, "token"])
    def test_access_token_from_refresh_invalid(self, response: object) -> None:
        with pytest.raises(InvalidRefreshResponseError):
            RobleOperations.access_token_from_refresh(response)


class TestDatabaseSpecs:
    """Tests for database request specs."""

    def test_create_table(self) -> None:
        spec = RobleOperations.create_table(
            "users",
            [
                ColumnDefinition(name="name", type="text"),
                {"name": "age", "type": "integer", "nullable": True},
            ],
        )

        assert spec.kind is Kind.DATABASE
        assert spec.method is HttpMethod.POST
        assert spec.endpoint == "create-table"
        assert not spec.is_auth_request
        assert spec.body["tableName"] == "users"
        assert spec.body["description"] == "Table users created from the Roble SDK"
        assert spec.body["columns"] == [
            {"name": "name", "type": "text"},
            {"name": "age", "type": "integer", "nullable": True},
        ]

    def test_create_table_custom_description(self) -> None:
        spec = RobleOperations.create_table("users", [], "People")

        assert spec.body["description"] == "People"

    def test_table_data(self) -> None:
        spec = RobleOperations.table_data("users")

        assert spec.method is HttpMethod.GET
        assert spec.endpoint == "table-data"
        assert spec.query == {"schema": "public", "table": "users"}

    def test_insert(self) -> None:
        spec = RobleOperations.insert("t", {"x": 1})

        assert spec.endpoint == "insert"
        assert spec.body == {"tableName": "t", "records": [{"x": 1}]}

    def test_read_stringifies_filters(self) -> None:
        spec = RobleOperations.read("t", {"_id": 5, "active": True, "deleted": None})

        assert spec.method is HttpMethod.GET
        assert spec.endpoint == "read"
        assert spec.query == {
            "tableName": "t",
            "_id": "5",
            "active": "true",
            "deleted": "null",
        }

    def test_read_without_filters(self) -> None:
        assert RobleOperations.read("t").query == {"tableName": "t"}

    def test_update_strips_id_fields(self) -> None:
        spec = RobleOperations.update("t", 5, {"_id": 99, "id": 7, "rol": "x"})

        assert spec.method is HttpMethod.PUT
        assert spec.endpoint == "update"
        assert spec.body == {
            "tableName": "t",
            "idColumn": "_id",
            "idValue": 5,
            "updates": {"rol": "x"},
        }

    def test_update_keeps_other_id_like_fields(self) -> None:
        spec = RobleOperations.update("t", 5, {"ID": 1, "Id": 2})

        assert spec.body["updates"] == {"ID": 1, "Id": 2}

    def test_delete(self) -> None:
        spec = RobleOperations.delete("t", "abc")

        assert spec.method is HttpMethod.DELETE
        assert spec.endpoint == "delete"
        assert spec.body == {"tableName": "t", "idColumn": "_id", "idValue": "abc"}


class TestResponseNarrowing:
    """Tests for shape narrowing of variable responses."""

    def test_inserted_first_element(self) -> None:
        response = {"inserted": [{"_id": 1, "x": 1}, {"_id": 2, "x": 2}]}

        record = RobleOperations.inserted_record(response)

        assert record == {"_id": 1, "x": 1}
        assert record is not response["inserted"][0]

    def test_inserted_empty_object_returned_as_is(self) -> None:
        assert RobleOperations.inserted_record({}) == {}

    def test_inserted_empty_list_returns_object(self) -> None:
        response = {"inserted": [], "skipped": 1}

        assert RobleOperations.inserted_record(response) == response

    def test_inserted_non_object_element_returned_unchanged(self) -> None:
        assert RobleOperations.inserted_record({"inserted": [7, 8]}) == 7

    @pytest.mark.parametrize("response", [[{"_id": 1}], []])
    def test_inserted_list_response_returned_as_is(self, response: list) -> None:
        assert RobleOperations.inserted_record(response) is response

    @pytest.mark.parametrize("response", [None, "ok", 3, True])
    def test_inserted_unusable_shape(self, response: object) -> None:
        with pytest.raises(InsertFailedError) as exc_info:
            RobleOperations.inserted_record(response, "t")

        assert exc_info.value.code == ErrorCode.INSERT_FAILED
        assert exc_info.value.details == {"table_name": "t"}

    def test_rows_from_list(self) -> None:
        assert RobleOperations.rows([{"a": 1}]) == [{"a": 1}]

    def test_rows_from_data(self) -> None:
        assert RobleOperations.rows({"data": [{"a": 1}]}) == [{"a": 1}]

    @pytest.mark.parametrize("response", [{}, None, "x", {"data": "nope"}, {"data": None}])
    def test_rows_unknown_shape(self, response: object) -> None:
        assert RobleOperations.rows(response) == []

    def test_first_row(self) -> None:
        assert RobleOperations.first_row([]) is None
        assert RobleOperations.first_row([{"_id": 5}, {"_id": 6}]) == {"_id": 5}


class TestStringifyQueryValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, "true"), (False, "false"), (None, "null"), (5, "5"), (1.5, "1.5"), ("s", "s")],
    )
    def test_values(self, value: object, expected: str) -> None:
        assert stringify_query_value(value) == expected

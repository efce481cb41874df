"""
Property-based tests for operation specs and response narrowing.

Properties:
- update never transmits _id or id inside updates, and keeps every other key
- read query always carries tableName plus one string per filter
- read narrowing never fails, whatever the response shape
"""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from roble_sdk.core.operations import RobleOperations

keys = st.text(min_size=1, max_size=15)
scalars = st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=20))
json_values = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=8), children, max_size=4),
    ),
    max_leaves=10,
)


class TestUpdateProperties:
    @given(patch=st.dictionaries(keys, scalars, max_size=8), record_id=st.integers())
    @settings(max_examples=100)
    def test_id_fields_stripped(self, patch: dict, record_id: int) -> None:
        spec = RobleOperations.update("t", record_id, patch)

        updates = spec.body["updates"]
        assert "_id" not in updates
        assert "id" not in updates
        assert updates == {k: v for k, v in patch.items() if k not in ("_id", "id")}
        assert spec.body["idColumn"] == "_id"
        assert spec.body["idValue"] == record_id


class TestReadProperties:
    @given(table=keys, filters=st.dictionaries(keys.filter(lambda k: k != "tableName"), scalars))
    @settings(max_examples=100)
    def test_query_shape(self, table: str, filters: dict) -> None:
        spec = RobleOperations.read(table, filters)

        assert spec.query is not None
        assert spec.query["tableName"] == table
        assert set(spec.query) == {"tableName", *filters}
        assert all(isinstance(v, str) for v in spec.query.values())

    @given(response=json_values)
    @settings(max_examples=200)
    def test_rows_never_fail(self, response: object) -> None:
        rows = RobleOperations.rows(response)

        assert isinstance(rows, list)
        if isinstance(response, list):
            assert rows is response

"""Unit tests for the select pipeline."""

from __future__ import annotations

import pytest

from helenabase_db.application import (
    FilterOperator,
    LimitOperator,
    SeqScanOperator,
    SortOperator,
    build_select_pipeline,
    execute_select,
)
from helenabase_db.domain.entities import Column, Table
from helenabase_db.domain.value_objects import ColumnType, SortDirection
from helenabase_db.ports.inbound import OrderBy, SelectOptions


@pytest.fixture
def table() -> Table:
    return Table(
        id="t-1",
        name="people",
        schema="public",
        columns=[
            Column("name", ColumnType.TEXT),
            Column("age", ColumnType.INTEGER),
            Column("city", ColumnType.TEXT),
        ],
        rows=[
            {"name": "Alice", "age": 30, "city": "Oslo"},
            {"name": "Bob", "age": 25, "city": "Rome"},
            {"name": "Carol", "age": 30, "city": "Rome"},
            {"name": "Dave", "age": None, "city": "Oslo"},
            {"name": "Eve", "age": 22, "city": "Oslo"},
        ],
    )


def names(rows: list[dict]) -> list[str]:
    return [row["name"] for row in rows]


@pytest.mark.unit
class TestOperators:
    """Tests for individual operators."""

    def test_seq_scan_copies_rows(self, table: Table) -> None:
        rows = list(SeqScanOperator(table))
        rows[0]["name"] = "changed"

        assert table.rows[0]["name"] == "Alice"
        assert len(rows) == 5

    def test_filter(self, table: Table) -> None:
        rows = list(FilterOperator(SeqScanOperator(table), {"city": "Rome"}))

        assert names(rows) == ["Bob", "Carol"]

    def test_sort_stable_on_ties(self, table: Table) -> None:
        rows = list(SortOperator(SeqScanOperator(table), [OrderBy("city")]))

        assert names(rows) == ["Alice", "Dave", "Eve", "Bob", "Carol"]

    def test_sort_nulls_first_ascending(self, table: Table) -> None:
        rows = list(SortOperator(SeqScanOperator(table), [OrderBy("age")]))

        assert names(rows)[0] == "Dave"

    def test_limit_and_offset(self, table: Table) -> None:
        rows = list(LimitOperator(SeqScanOperator(table), limit=2, offset=1))

        assert names(rows) == ["Bob", "Carol"]

    def test_offset_past_end(self, table: Table) -> None:
        assert list(LimitOperator(SeqScanOperator(table), limit=None, offset=10)) == []


@pytest.mark.unit
class TestExecuteSelect:
    """Tests for the composed pipeline."""

    def test_no_options_returns_all_in_storage_order(self, table: Table) -> None:
        assert names(execute_select(table, SelectOptions())) == [
            "Alice", "Bob", "Carol", "Dave", "Eve",
        ]

    def test_multi_key_sort(self, table: Table) -> None:
        options = SelectOptions(
            order_by=[OrderBy("age", SortDirection.DESC), OrderBy("name", SortDirection.DESC)]
        )

        assert names(execute_select(table, options)) == ["Carol", "Alice", "Bob", "Eve", "Dave"]

    def test_filter_then_sort_then_page(self, table: Table) -> None:
        options = SelectOptions(
            where={"city": "Oslo"},
            order_by=[OrderBy("name", SortDirection.DESC)],
            limit=1,
            offset=1,
        )

        assert names(execute_select(table, options)) == ["Dave"]

    def test_limit_zero(self, table: Table) -> None:
        assert execute_select(table, SelectOptions(limit=0)) == []

    def test_pipeline_shape(self, table: Table) -> None:
        operator = build_select_pipeline(
            table, SelectOptions(where={"a": 1}, order_by=[OrderBy("a")], limit=1)
        )

        assert isinstance(operator, LimitOperator)

    def test_negative_options_rejected(self) -> None:
        with pytest.raises(ValueError):
            SelectOptions(limit=-1)
        with pytest.raises(ValueError):
            SelectOptions(offset=-1)

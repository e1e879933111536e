"""Unit tests for insert-time value resolution."""

from __future__ import annotations

import pytest

from helenabase_db.domain.entities import Column, Table
from helenabase_db.domain.services import (
    backfill_value,
    build_row,
    next_auto_increment,
    resolve_column_value,
)
from helenabase_db.domain.value_objects import (
    CURRENT_TIMESTAMP,
    GENERATED_UUID,
    ColumnType,
    LiteralDefault,
)


@pytest.fixture
def table() -> Table:
    return Table(
        id="t-1",
        name="items",
        schema="public",
        columns=[
            Column("id", ColumnType.INTEGER, primary=True, auto_increment=True),
            Column("ref", ColumnType.UUID, default=GENERATED_UUID),
            Column("status", ColumnType.TEXT, default=LiteralDefault("draft")),
            Column("created_at", ColumnType.TIMESTAMP, default=CURRENT_TIMESTAMP),
            Column("note", ColumnType.TEXT),
        ],
    )


@pytest.mark.unit
class TestNextAutoIncrement:
    """Tests for auto-increment."""

    def test_empty_table_starts_at_one(self) -> None:
        assert next_auto_increment([], "id") == 1

    def test_max_plus_one(self) -> None:
        assert next_auto_increment([{"id": 3}, {"id": 7}, {"id": 5}], "id") == 8

    def test_ignores_non_numeric(self) -> None:
        rows = [{"id": "x"}, {"id": None}, {"id": True}, {}, {"id": 2}]

        assert next_auto_increment(rows, "id") == 3

    def test_float_values(self) -> None:
        assert next_auto_increment([{"id": 2.5}], "id") == 3.5


@pytest.mark.unit
class TestBuildRow:
    """Tests for building new rows."""

    def test_defaults_applied(self, table: Table, identity) -> None:
        row = build_row(table, {}, identity)

        assert row == {
            "id": 1,
            "ref": "id-1",
            "status": "draft",
            "created_at": "2024-01-01T00:00:01.000Z",
            "note": None,
        }

    def test_explicit_values_win(self, table: Table, identity) -> None:
        row = build_row(table, {"id": 10, "status": "live", "note": None}, identity)

        assert row["id"] == 10
        assert row["status"] == "live"
        assert row["note"] is None

    def test_explicit_none_beats_default(self, table: Table, identity) -> None:
        row = build_row(table, {"status": None}, identity)

        assert row["status"] is None

    def test_unknown_keys_dropped(self, table: Table, identity) -> None:
        row = build_row(table, {"extra": 1}, identity)

        assert "extra" not in row
        assert list(row) == table.column_names

    def test_auto_increment_follows_existing_rows(self, table: Table, identity) -> None:
        table.rows.append({"id": 41})

        assert build_row(table, {}, identity)["id"] == 42

    def test_falsy_literal_default_kept(self, identity) -> None:
        column = Column("count", ColumnType.INTEGER, default=LiteralDefault(0))

        assert resolve_column_value(column, {}, [], identity) == 0

    def test_supplied_container_is_copied(self, table: Table, identity) -> None:
        note = {"lines": ["x"]}

        row = build_row(table, {"note": note}, identity)
        note["lines"].append("y")

        assert row["note"] == {"lines": ["x"]}


@pytest.mark.unit
class TestBackfill:
    """Tests for the value given to existing rows on add_column."""

    def test_no_default(self, identity) -> None:
        assert backfill_value(Column("x"), identity) is None

    def test_generated_per_call(self, identity) -> None:
        column = Column("ref", ColumnType.UUID, default=GENERATED_UUID)

        assert backfill_value(column, identity) != backfill_value(column, identity)

    def test_literal(self, identity) -> None:
        column = Column("flag", ColumnType.BOOLEAN, default=LiteralDefault(False))

        assert backfill_value(column, identity) is False

    def test_container_literal_copied_per_call(self, identity) -> None:
        default = LiteralDefault(["a"])
        column = Column("tags", ColumnType.ARRAY, default=default)

        first = backfill_value(column, identity)
        second = backfill_value(column, identity)
        first.append("b")

        assert second == ["a"]
        assert default.value == ["a"]

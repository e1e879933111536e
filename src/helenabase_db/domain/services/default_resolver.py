"""Insert-time value resolution for declared columns.

For every declared column the value of a new row is chosen in this order:

    1. an explicit value supplied by the caller (even an explicit None)
    2. the column default (literal, generated identifier or current time)
    3. auto-increment: one more than the largest numeric value in the column
    4. None

Keys in the supplied data that do not name a declared column are dropped.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from helenabase_db.domain.entities import Column, Table
from helenabase_db.domain.value_objects import (
    CurrentTimestamp,
    DefaultSpec,
    GeneratedUuid,
    LiteralDefault,
    RowData,
)

if TYPE_CHECKING:
    from helenabase_db.ports.outbound import IdentityGenerator


def resolve_default(spec: DefaultSpec, identity: IdentityGenerator) -> Any:
    """Produce the value a default stands for."""
    if isinstance(spec, GeneratedUuid):
        return identity.new_id()
    if isinstance(spec, CurrentTimestamp):
        return identity.now()
    if isinstance(spec, LiteralDefault):
        return copy.deepcopy(spec.value)
    raise TypeError(f"Unknown default spec: {spec!r}")


def next_auto_increment(rows: Iterable[Mapping[str, Any]], column_name: str) -> int | float:
    """Return one more than the largest numeric value in a column.

    Missing, null and non-numeric cells count as 0, so an empty table
    yields 1.
    """
    highest: int | float = 0
    for row in rows:
        value = row.get(column_name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value > highest:
            highest = value
    return highest + 1


def resolve_column_value(
    column: Column,
    data: Mapping[str, Any],
    existing_rows: list[RowData],
    identity: IdentityGenerator,
) -> Any:
    """Resolve one column's value for a new row."""
    if column.name in data:
        return copy.deepcopy(data[column.name])
    if column.default is not None:
        return resolve_default(column.default, identity)
    if column.auto_increment:
        return next_auto_increment(existing_rows, column.name)
    return None


def build_row(table: Table, data: Mapping[str, Any], identity: IdentityGenerator) -> RowData:
    """Build a new row holding exactly the table's declared columns."""
    return {
        column.name: resolve_column_value(column, data, table.rows, identity)
        for column in table.columns
    }


def backfill_value(column: Column, identity: IdentityGenerator) -> Any:
    """Value given to existing rows when a column is added."""
    if column.default is None:
        return None
    return resolve_default(column.default, identity)

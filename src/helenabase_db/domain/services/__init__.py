"""Domain services for the relational store.

Exports:
    Default Resolution:
        - build_row: Build a new row from supplied data and column defaults
        - resolve_default: Produce the value of a default spec
        - next_auto_increment: Max + 1 over a column
        - backfill_value: Value for existing rows when a column is added

    Row Filter:
        - matches_where: Equality WHERE filter
        - compare_values: Three-way ordering of dynamic values
        - strict_equals: Equality without bool/number coercion
"""

from helenabase_db.domain.services.default_resolver import (
    backfill_value,
    build_row,
    next_auto_increment,
    resolve_column_value,
    resolve_default,
)
from helenabase_db.domain.services.row_filter import (
    compare_values,
    matches_where,
    strict_equals,
)

__all__ = [
    "build_row",
    "resolve_default",
    "resolve_column_value",
    "next_auto_increment",
    "backfill_value",
    "matches_where",
    "compare_values",
    "strict_equals",
]

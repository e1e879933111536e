"""Core names and row primitives for the relational store.

Row values are JSON-compatible (None, bool, numbers, strings, lists and
string-keyed dicts).
"""

from __future__ import annotations

from typing import Any, NewType


SchemaName = NewType("SchemaName", str)
"""Name of a schema (namespace grouping tables)."""

RowData = dict[str, Any]
"""One row record: column name to value."""

# Seeded namespace
DEFAULT_SCHEMA = SchemaName("public")

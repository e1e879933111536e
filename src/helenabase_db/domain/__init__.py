"""Relational store domain layer."""

from helenabase_db.domain.entities import Column, Database, Index, Policy, Table
from helenabase_db.domain.value_objects import (
    DEFAULT_SCHEMA,
    ColumnType,
    CurrentTimestamp,
    ErrorKind,
    GeneratedUuid,
    LiteralDefault,
    PolicyOperation,
    SortDirection,
)

__all__ = [
    "Column",
    "Database",
    "Index",
    "Policy",
    "Table",
    "DEFAULT_SCHEMA",
    "ColumnType",
    "CurrentTimestamp",
    "ErrorKind",
    "GeneratedUuid",
    "LiteralDefault",
    "PolicyOperation",
    "SortDirection",
]

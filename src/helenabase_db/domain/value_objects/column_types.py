"""Column type and default value definitions.

Column defaults are a tagged variant instead of magic strings:

    LiteralDefault(value)  - store the value as given
    GeneratedUuid          - a fresh identifier per row
    CurrentTimestamp       - the insert time

The persisted snapshot keeps the console's original wire spelling
("gen_random_uuid()" / "now()") so existing snapshots load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ColumnType(Enum):
    """Declared column types."""

    TEXT = "TEXT"
    VARCHAR = "VARCHAR"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    UUID = "UUID"
    JSON = "JSON"
    ARRAY = "ARRAY"
    BLOB = "BLOB"

    @classmethod
    def parse(cls, text: str | None) -> ColumnType:
        """Map a SQL type spelling to a column type.

        Unknown or missing spellings fall back to TEXT.
        """
        if not text:
            return cls.TEXT
        return _TYPE_ALIASES.get(text.strip().upper(), cls.TEXT)


_TYPE_ALIASES: dict[str, ColumnType] = {
    **{t.value: t for t in ColumnType},
    "INT": ColumnType.INTEGER,
    "INT4": ColumnType.INTEGER,
    "INT8": ColumnType.INTEGER,
    "BIGINT": ColumnType.INTEGER,
    "SMALLINT": ColumnType.INTEGER,
    "SERIAL": ColumnType.INTEGER,
    "BIGSERIAL": ColumnType.INTEGER,
    "REAL": ColumnType.FLOAT,
    "DOUBLE": ColumnType.FLOAT,
    "NUMERIC": ColumnType.FLOAT,
    "DECIMAL": ColumnType.FLOAT,
    "BOOL": ColumnType.BOOLEAN,
    "CHAR": ColumnType.VARCHAR,
    "CHARACTER": ColumnType.VARCHAR,
    "STRING": ColumnType.TEXT,
    "DATE": ColumnType.TIMESTAMP,
    "DATETIME": ColumnType.TIMESTAMP,
    "TIMESTAMPTZ": ColumnType.TIMESTAMP,
    "JSONB": ColumnType.JSON,
    "BYTEA": ColumnType.BLOB,
    "BINARY": ColumnType.BLOB,
    "VARBINARY": ColumnType.BLOB,
}


@dataclass(frozen=True, slots=True)
class LiteralDefault:
    """A literal default value stored as-is."""

    value: Any


@dataclass(frozen=True, slots=True)
class GeneratedUuid:
    """Default resolved to a freshly generated identifier."""


@dataclass(frozen=True, slots=True)
class CurrentTimestamp:
    """Default resolved to the current time."""


DefaultSpec = Union[LiteralDefault, GeneratedUuid, CurrentTimestamp]

GENERATED_UUID = GeneratedUuid()
CURRENT_TIMESTAMP = CurrentTimestamp()

# Snapshot spelling of the generator sentinels
UUID_SENTINEL = "gen_random_uuid()"
NOW_SENTINEL = "now()"


def default_from_wire(raw: Any) -> DefaultSpec:
    """Decode a persisted default into its variant."""
    if raw == UUID_SENTINEL:
        return GENERATED_UUID
    if raw == NOW_SENTINEL:
        return CURRENT_TIMESTAMP
    return LiteralDefault(raw)


def default_to_wire(spec: DefaultSpec) -> Any:
    """Encode a default variant for the snapshot."""
    if isinstance(spec, GeneratedUuid):
        return UUID_SENTINEL
    if isinstance(spec, CurrentTimestamp):
        return NOW_SENTINEL
    return spec.value

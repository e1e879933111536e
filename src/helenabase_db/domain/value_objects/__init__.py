"""Value objects for the relational store domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Identifiers:
        - SchemaName: Type-safe schema name
        - RowData: Row record alias
        - DEFAULT_SCHEMA: The seeded "public" schema

    Column Types:
        - ColumnType: Declared column types
        - LiteralDefault, GeneratedUuid, CurrentTimestamp: Default variants
        - default_from_wire, default_to_wire: Snapshot encoding of defaults

    Query Types:
        - PolicyOperation: Operation guarded by a policy
        - SortDirection: ORDER BY direction
        - ErrorKind: Failure classification
"""

from helenabase_db.domain.value_objects.column_types import (
    CURRENT_TIMESTAMP,
    GENERATED_UUID,
    NOW_SENTINEL,
    UUID_SENTINEL,
    ColumnType,
    CurrentTimestamp,
    DefaultSpec,
    GeneratedUuid,
    LiteralDefault,
    default_from_wire,
    default_to_wire,
)
from helenabase_db.domain.value_objects.identifiers import (
    DEFAULT_SCHEMA,
    RowData,
    SchemaName,
)
from helenabase_db.domain.value_objects.query_types import (
    ErrorKind,
    PolicyOperation,
    SortDirection,
)

__all__ = [
    # Identifiers
    "SchemaName",
    "RowData",
    "DEFAULT_SCHEMA",
    # Column types
    "ColumnType",
    "DefaultSpec",
    "LiteralDefault",
    "GeneratedUuid",
    "CurrentTimestamp",
    "GENERATED_UUID",
    "CURRENT_TIMESTAMP",
    "UUID_SENTINEL",
    "NOW_SENTINEL",
    "default_from_wire",
    "default_to_wire",
    # Query types
    "PolicyOperation",
    "SortDirection",
    "ErrorKind",
]

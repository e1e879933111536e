"""Database entity - schema name to table name to Table.

The whole structure is the unit of persistence: it is loaded once and
written back as one snapshot after every mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from helenabase_db.domain.entities.table import Table


@dataclass
class Database:
    """All schemas and their tables, in insertion order."""

    schemas: dict[str, dict[str, Table]] = field(default_factory=dict)

    @classmethod
    def empty(cls, default_schema: str) -> Database:
        """Create a database holding one empty schema."""
        return cls(schemas={default_schema: {}})

    def schema_names(self) -> list[str]:
        return list(self.schemas)

    def ensure_schema(self, schema: str) -> dict[str, Table]:
        """Return the table mapping for a schema, creating it if absent."""
        return self.schemas.setdefault(schema, {})

    def tables(self, schema: str) -> list[Table]:
        return list(self.schemas.get(schema, {}).values())

    def get_table(self, schema: str, name: str) -> Table | None:
        return self.schemas.get(schema, {}).get(name)

    def put_table(self, schema: str, table: Table) -> None:
        self.ensure_schema(schema)[table.name] = table

    def remove_table(self, schema: str, name: str) -> Table | None:
        tables = self.schemas.get(schema)
        if tables is None:
            return None
        return tables.pop(name, None)

    def iter_tables(self) -> Iterator[Table]:
        for tables in self.schemas.values():
            yield from tables.values()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted snapshot shape."""
        return {
            schema: {name: table.to_dict() for name, table in tables.items()}
            for schema, tables in self.schemas.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Database:
        """Deserialize a persisted snapshot."""
        return cls(
            schemas={
                schema: {name: Table.from_dict(table) for name, table in tables.items()}
                for schema, tables in data.items()
            }
        )

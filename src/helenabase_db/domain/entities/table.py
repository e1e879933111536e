"""Table entity with its declarative indexes and row-level policies.

A table owns an ordered column sequence (declaration order is display
order) and an unordered list of row records. Indexes and policies are
metadata only: the query pipeline never consults them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from helenabase_db.domain.entities.column import Column
from helenabase_db.domain.value_objects import PolicyOperation, RowData


@dataclass
class Index:
    """A declared index over one or more columns."""

    name: str
    columns: list[str] = field(default_factory=list)
    unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns), "unique": self.unique}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Index:
        return cls(
            name=data["name"],
            columns=list(data.get("columns", [])),
            unique=bool(data.get("unique", False)),
        )


@dataclass
class Policy:
    """A declared row-level policy. The expressions are opaque strings."""

    id: str
    name: str
    type: PolicyOperation
    using: str
    check: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "using": self.using,
        }
        if self.check is not None:
            data["check"] = self.check
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Policy:
        return cls(
            id=data["id"],
            name=data["name"],
            type=PolicyOperation(data["type"]),
            using=data.get("using", ""),
            check=data.get("check"),
        )


@dataclass
class Table:
    """A named, typed collection of rows within a schema.

    Attributes:
        id: Unique table identifier.
        name: Table name, unique within its schema.
        schema: Owning schema name.
        columns: Ordered column declarations.
        rows: Row records keyed by column name.
        indexes: Declared indexes (not enforced).
        policies: Declared policies (not evaluated).
        created_at: ISO-8601 creation timestamp.
        updated_at: ISO-8601 timestamp of the last mutation.
    """

    id: str
    name: str
    schema: str
    columns: list[Column] = field(default_factory=list)
    rows: list[RowData] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    policies: list[Policy] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def get_column(self, name: str) -> Column | None:
        """Return the column with the given name, if declared."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def has_column(self, name: str) -> bool:
        return self.get_column(name) is not None

    def primary_columns(self) -> list[Column]:
        return [c for c in self.columns if c.primary]

    def validate(self) -> str | None:
        """Check structural invariants.

        Returns:
            A description of the first violation, or None if valid.
        """
        if not self.name:
            return "Table name must not be empty"
        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                return f"Duplicate column '{column.name}'"
            seen.add(column.name)
        primaries = self.primary_columns()
        if len(primaries) > 1:
            names = ", ".join(c.name for c in primaries)
            return f"Table {self.name} declares more than one primary column ({names})"
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot shape."""
        return {
            "id": self.id,
            "name": self.name,
            "schema": self.schema,
            "columns": [c.to_dict() for c in self.columns],
            "rows": [dict(row) for row in self.rows],
            "indexes": [i.to_dict() for i in self.indexes],
            "policies": [p.to_dict() for p in self.policies],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Table:
        """Deserialize from the snapshot shape."""
        return cls(
            id=data["id"],
            name=data["name"],
            schema=data["schema"],
            columns=[Column.from_dict(c) for c in data.get("columns", [])],
            rows=[dict(row) for row in data.get("rows", [])],
            indexes=[Index.from_dict(i) for i in data.get("indexes", [])],
            policies=[Policy.from_dict(p) for p in data.get("policies", [])],
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )

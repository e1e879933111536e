"""Column entity - a typed field declaration within a table.

Snapshot format (optional keys are omitted when unset):

    {"name": "email", "type": "VARCHAR", "nullable": false,
     "default"?: ..., "primary"?: bool, "unique"?: bool,
     "autoIncrement"?: bool, "length"?: int}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from helenabase_db.domain.value_objects import (
    ColumnType,
    DefaultSpec,
    default_from_wire,
    default_to_wire,
)


@dataclass
class Column:
    """A column declaration.

    Attributes:
        name: Column name, unique within its table.
        type: Declared column type.
        nullable: Whether NULL is allowed (declarative only).
        default: Default resolved at insert time, or None for no default.
        primary: Primary key flag.
        unique: Unique flag (declarative only).
        auto_increment: Fill with max + 1 when no value or default applies.
        length: Optional length constraint (declarative only).
    """

    name: str
    type: ColumnType = ColumnType.TEXT
    nullable: bool = True
    default: DefaultSpec | None = None
    primary: bool = False
    unique: bool = False
    auto_increment: bool = False
    length: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Column name must not be empty")
        if self.length is not None and self.length <= 0:
            raise ValueError(f"Column length must be positive, got {self.length}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "nullable": self.nullable,
        }
        if self.default is not None:
            data["default"] = default_to_wire(self.default)
        if self.primary:
            data["primary"] = True
        if self.unique:
            data["unique"] = True
        if self.auto_increment:
            data["autoIncrement"] = True
        if self.length is not None:
            data["length"] = self.length
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        """Deserialize from the snapshot shape."""
        default = default_from_wire(data["default"]) if "default" in data else None
        return cls(
            name=data["name"],
            type=ColumnType.parse(data.get("type")),
            nullable=bool(data.get("nullable", True)),
            default=default,
            primary=bool(data.get("primary", False)),
            unique=bool(data.get("unique", False)),
            auto_increment=bool(data.get("autoIncrement", False)),
            length=data.get("length"),
        )

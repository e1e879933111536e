"""Relational store port - the public operation surface.

This inbound port defines the contract the presentation layer uses:
catalog operations (schemas, tables, columns), row operations
(insert/select/update/delete), the minimal SQL entry point, the query
planner stub and query history.

Failure signalling:
    - Catalog operations return False on failure (missing table,
      duplicate name, invalid definition).
    - Row operations and execute_sql return a QueryResult with
      success=False, an error message and an ErrorKind.
    - Neither raises for expected failures.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from helenabase_db.domain.entities import Column, Table
from helenabase_db.domain.value_objects import ErrorKind, RowData, SortDirection


@dataclass
class QueryResult:
    """Outcome of a row operation or SQL statement.

    Attributes:
        success: Whether the operation succeeded.
        data: Rows returned (select) or inserted (insert).
        error: Error message on failure.
        rows_affected: Rows returned, inserted, updated or deleted.
        execution_time: Measured time in milliseconds.
        error_kind: Failure classification on failure.
    """

    success: bool
    data: list[RowData] | None = None
    error: str | None = None
    rows_affected: int | None = None
    execution_time: float | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def failure(
        cls,
        error: str,
        kind: ErrorKind,
        execution_time: float | None = None,
    ) -> QueryResult:
        return cls(success=False, error=error, error_kind=kind, execution_time=execution_time)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: unset optional fields are omitted."""
        data: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            data["data"] = self.data
        if self.error is not None:
            data["error"] = self.error
        if self.rows_affected is not None:
            data["rowsAffected"] = self.rows_affected
        if self.execution_time is not None:
            data["executionTime"] = self.execution_time
        return data


@dataclass
class QueryExplanation:
    """Query plan description produced by the planner stub."""

    plan: list[str]
    estimated_cost: float
    indexes_used: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan": list(self.plan),
            "estimatedCost": self.estimated_cost,
            "indexesUsed": list(self.indexes_used),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class OrderBy:
    """One ORDER BY key."""

    column: str
    direction: SortDirection = SortDirection.ASC

    @property
    def ascending(self) -> bool:
        return self.direction == SortDirection.ASC


@dataclass
class SelectOptions:
    """Options for select.

    Attributes:
        where: Equality filter, column name to required value.
        order_by: Sort keys applied in order.
        limit: Maximum rows to keep after the offset (None = all).
        offset: Leading rows to drop.
    """

    where: dict[str, Any] | None = None
    order_by: list[OrderBy] = field(default_factory=list)
    limit: int | None = None
    offset: int = 0

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")


class RelationalStore(Protocol):
    """Protocol for the relational store engine.

    Every public operation is atomic from the caller's perspective and
    every successful mutation is persisted before it returns.
    """

    @abstractmethod
    def get_schemas(self) -> list[str]:
        """Return schema names in insertion order."""
        ...

    @abstractmethod
    def get_tables(self, schema: str) -> list[Table]:
        """Return the tables of a schema (empty if the schema is absent)."""
        ...

    @abstractmethod
    def get_table(self, schema: str, name: str) -> Table | None:
        """Return a table, or None if absent."""
        ...

    @abstractmethod
    def create_table(self, schema: str, table: Table) -> bool:
        """Create a table, implicitly creating the schema.

        Returns:
            False if the table already exists or is invalid.
        """
        ...

    @abstractmethod
    def drop_table(self, schema: str, name: str) -> bool:
        """Remove a table and its rows. False if absent."""
        ...

    @abstractmethod
    def add_column(self, schema: str, table: str, column: Column) -> bool:
        """Append a column and backfill existing rows with its default."""
        ...

    @abstractmethod
    def remove_column(self, schema: str, table: str, column_name: str) -> bool:
        """Remove a column and its key from every row."""
        ...

    @abstractmethod
    def insert(self, schema: str, table: str, data: Mapping[str, Any]) -> QueryResult:
        """Insert one row, resolving defaults and auto-increment."""
        ...

    @abstractmethod
    def select(
        self, schema: str, table: str, options: SelectOptions | None = None
    ) -> QueryResult:
        """Filter, sort and page the rows of a table."""
        ...

    @abstractmethod
    def update(
        self, schema: str, table: str, where: Mapping[str, Any], data: Mapping[str, Any]
    ) -> QueryResult:
        """Merge data into every row matching the filter."""
        ...

    @abstractmethod
    def delete(self, schema: str, table: str, where: Mapping[str, Any]) -> QueryResult:
        """Remove every row matching the filter."""
        ...

    @abstractmethod
    async def execute_sql(self, sql: str) -> QueryResult:
        """Execute a CREATE TABLE or SELECT ... FROM statement."""
        ...

    @abstractmethod
    def explain_query(self, sql: str) -> QueryExplanation:
        """Describe how a statement would run."""
        ...

    @abstractmethod
    def get_query_history(self) -> list[str]:
        """Return saved statements, most recent first."""
        ...

    @abstractmethod
    def save_query_to_history(self, sql: str) -> None:
        """Push a statement onto the bounded history."""
        ...

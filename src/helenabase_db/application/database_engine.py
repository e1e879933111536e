"""Database Engine - unified entry point for the relational store.

This module provides the DatabaseEngine class that owns the in-memory
Database (schemas -> tables -> rows), executes catalog and row
operations against it, recognizes a minimal SQL subset and writes the
whole structure back to a key-value store after every mutation.

Usage:
    from helenabase_db.adapters.outbound import (
        InMemoryKeyValueStore,
        SystemIdentityGenerator,
    )
    from helenabase_db.application import DatabaseEngine

    db = DatabaseEngine(InMemoryKeyValueStore(), SystemIdentityGenerator())

    db.insert("public", "users", {"email": "a@example.com", "name": "Alice"})
    result = db.select("public", "users")
    result = await db.execute_sql("SELECT * FROM public.users")

Persistence model:
    - The snapshot is loaded once in the constructor; the default
      `users` table is seeded right after if it is missing.
    - Each mutation runs in a mutation scope under the engine lock. The
      snapshot is written through when the scope ends; if the scope
      raises, the in-memory state is restored from the last persisted
      snapshot, so a partially applied mutation is never observable.
"""

from __future__ import annotations

import asyncio
import copy
import threading
import time
from contextlib import contextmanager
from typing import Any, Generator, Mapping

from helenabase_db.adapters.inbound.sql_parser import (
    CreateTableStatement,
    MalformedStatementError,
    SelectStatement,
    SQLParser,
    Statement,
    UnsupportedStatementError,
)
from helenabase_db.application.executor import execute_select
from helenabase_db.domain.entities import Column, Database, Index, Table
from helenabase_db.domain.services import backfill_value, build_row, matches_where
from helenabase_db.domain.value_objects import (
    CURRENT_TIMESTAMP,
    DEFAULT_SCHEMA,
    GENERATED_UUID,
    ColumnType,
    ErrorKind,
)
from helenabase_db.infrastructure.logging import bound_context, get_logger
from helenabase_db.infrastructure.metrics import MetricsRegistry
from helenabase_db.infrastructure.tracing import trace_span
from helenabase_db.ports.inbound import QueryExplanation, QueryResult, SelectOptions
from helenabase_db.ports.outbound import IdentityGenerator, KeyValueStore, StorageError

logger = get_logger(__name__)

SNAPSHOT_KEY = "helenabase_database"
HISTORY_KEY = "helenabase_query_history"
HISTORY_LIMIT = 50

# Planner stub output
EXPLAIN_PLAN = ["Seq Scan on table", "Filter: (condition)", "Sort: column ASC"]
EXPLAIN_COST = 100.0
EXPLAIN_INDEXES = ["users_email_idx"]


def default_users_table(identity: IdentityGenerator, schema: str = DEFAULT_SCHEMA) -> Table:
    """Build the `users` table seeded into a fresh database."""
    now = identity.now()
    return Table(
        id=identity.new_id(),
        name="users",
        schema=schema,
        columns=[
            Column("id", ColumnType.UUID, nullable=False, primary=True, default=GENERATED_UUID),
            Column("email", ColumnType.VARCHAR, nullable=False, unique=True, length=255),
            Column("name", ColumnType.VARCHAR, nullable=False, length=100),
            Column("avatar_url", ColumnType.TEXT, nullable=True),
            Column("created_at", ColumnType.TIMESTAMP, nullable=False, default=CURRENT_TIMESTAMP),
        ],
        indexes=[Index(name="users_email_idx", columns=["email"], unique=True)],
        created_at=now,
        updated_at=now,
    )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _not_found(schema: str, table: str, start: float) -> QueryResult:
    return QueryResult.failure(
        f"Table {schema}.{table} not found", ErrorKind.NOT_FOUND, _elapsed_ms(start)
    )


class _MutationScope:
    """Tracks whether a mutation changed anything that must be persisted."""

    __slots__ = ("dirty",)

    def __init__(self) -> None:
        self.dirty = False

    def mark_dirty(self) -> None:
        self.dirty = True


class DatabaseEngine:
    """Relational store engine.

    Owns the Database structure and implements the RelationalStore port.

    Thread Safety:
        Every public operation holds one re-entrant lock for its whole
        duration, so concurrent callers observe operations one at a time
        and snapshots never reflect a partially applied mutation. The
        simulated delay of execute_sql is awaited outside the lock.
    """

    def __init__(
        self,
        store: KeyValueStore,
        identity: IdentityGenerator,
        *,
        metrics: MetricsRegistry | None = None,
        parser: SQLParser | None = None,
        snapshot_key: str = SNAPSHOT_KEY,
        history_key: str = HISTORY_KEY,
        history_limit: int = HISTORY_LIMIT,
        sql_delay_seconds: float = 0.1,
        default_schema: str = DEFAULT_SCHEMA,
        seed_defaults: bool = True,
    ) -> None:
        """Load the snapshot and seed the default tables.

        Args:
            store: Key-value store holding the snapshot and history.
            identity: Identifier and clock source.
            metrics: Optional metrics registry.
            parser: Statement parser (defaults to one using default_schema).
            snapshot_key: Store key of the database snapshot.
            history_key: Store key of the query history.
            history_limit: Maximum number of saved queries.
            sql_delay_seconds: Simulated round-trip delay of execute_sql.
            default_schema: Schema created empty on first use.
            seed_defaults: Whether to seed the `users` table.

        Raises:
            StorageError: If the persisted snapshot cannot be decoded.
        """
        if history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {history_limit}")

        self._store = store
        self._identity = identity
        self._metrics = metrics
        self._parser = parser or SQLParser(default_schema=default_schema)
        self._snapshot_key = snapshot_key
        self._history_key = history_key
        self._history_limit = history_limit
        self._sql_delay_seconds = sql_delay_seconds
        self._default_schema = default_schema

        self._lock = threading.RLock()
        self._database = self._load_snapshot()

        if seed_defaults:
            self._seed_default_tables()
        self._update_table_gauge()

        logger.info(
            "database_engine_started",
            schemas=len(self._database.schemas),
            tables=sum(1 for _ in self._database.iter_tables()),
        )

    @property
    def default_schema(self) -> str:
        return self._default_schema

    # Snapshot handling

    def _load_snapshot(self) -> Database:
        data = self._store.load(self._snapshot_key)
        if data is None:
            return Database.empty(self._default_schema)
        try:
            database = Database.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"Invalid database snapshot: {e}") from e
        database.ensure_schema(self._default_schema)
        return database

    def _persist(self) -> None:
        self._store.save(self._snapshot_key, self._database.to_dict())
        if self._metrics:
            self._metrics.snapshot_writes_total.inc()

    @contextmanager
    def _mutation(self) -> Generator[_MutationScope, None, None]:
        """Run a mutation with write-through on success and restore on failure."""
        with self._lock:
            scope = _MutationScope()
            try:
                yield scope
                if scope.dirty:
                    self._persist()
            except BaseException:
                self._database = self._load_snapshot()
                if self._metrics:
                    self._metrics.snapshot_restores_total.inc()
                logger.warning("mutation_rolled_back", dirty=scope.dirty)
                raise

    def _seed_default_tables(self) -> None:
        if self._database.get_table(self._default_schema, "users") is None:
            self._create_table(
                self._default_schema, default_users_table(self._identity, self._default_schema)
            )

    def _touch(self, table: Table) -> None:
        table.updated_at = self._identity.now()

    def _update_table_gauge(self) -> None:
        if self._metrics:
            self._metrics.tables.set(sum(1 for _ in self._database.iter_tables()))

    def _observe(self, operation: str, result: QueryResult, start: float) -> QueryResult:
        if self._metrics:
            self._metrics.observe_operation(
                operation,
                result.success,
                time.perf_counter() - start,
                rows=result.rows_affected or 0,
            )
        return result

    # Catalog reads

    def get_schemas(self) -> list[str]:
        """Return schema names in insertion order."""
        with self._lock:
            return self._database.schema_names()

    def get_tables(self, schema: str | None = None) -> list[Table]:
        """Return copies of the tables in a schema (empty if absent)."""
        with self._lock:
            return copy.deepcopy(self._database.tables(schema or self._default_schema))

    def get_table(self, schema: str, name: str) -> Table | None:
        """Return a copy of a table, or None if absent."""
        with self._lock:
            table = self._database.get_table(schema, name)
            return copy.deepcopy(table) if table is not None else None

    # Catalog mutations

    def _create_table(self, schema: str, table: Table) -> ErrorKind | None:
        with self._mutation() as scope:
            if self._database.get_table(schema, table.name) is not None:
                return ErrorKind.ALREADY_EXISTS
            problem = table.validate()
            if problem is not None:
                logger.warning("table_definition_invalid", schema=schema, table=table.name, reason=problem)
                return ErrorKind.INVALID

            stored = copy.deepcopy(table)
            stored.schema = schema
            if not stored.id:
                stored.id = self._identity.new_id()
            if not stored.created_at:
                stored.created_at = self._identity.now()
            if not stored.updated_at:
                stored.updated_at = stored.created_at

            self._database.put_table(schema, stored)
            scope.mark_dirty()
            self._update_table_gauge()

        logger.info("table_created", schema=schema, table=table.name, columns=len(table.columns))
        return None

    def create_table(self, schema: str, table: Table) -> bool:
        """Create a table, implicitly creating the schema.

        Returns:
            False if the table already exists or its definition is invalid
            (duplicate column names, more than one primary column).
        """
        error = self._create_table(schema, table)
        if error is not None:
            logger.info("create_table_rejected", schema=schema, table=table.name, reason=error.value)
        return error is None

    def drop_table(self, schema: str, name: str) -> bool:
        """Remove a table and all its rows. False if absent."""
        with self._mutation() as scope:
            if self._database.remove_table(schema, name) is None:
                logger.info("drop_table_rejected", schema=schema, table=name, reason=ErrorKind.NOT_FOUND.value)
                return False
            scope.mark_dirty()
            self._update_table_gauge()

        logger.info("table_dropped", schema=schema, table=name)
        return True

    def add_column(self, schema: str, table: str, column: Column) -> bool:
        """Append a column and backfill every existing row.

        Existing rows receive the column's default (generated per row for
        sentinel defaults) or None.
        """
        with self._mutation() as scope:
            target = self._database.get_table(schema, table)
            error: ErrorKind | None = None
            if target is None:
                error = ErrorKind.NOT_FOUND
            elif target.has_column(column.name):
                error = ErrorKind.ALREADY_EXISTS
            elif column.primary and target.primary_columns():
                error = ErrorKind.INVALID
            if error is not None:
                logger.info(
                    "add_column_rejected", schema=schema, table=table, column=column.name, reason=error.value
                )
                return False

            target.columns.append(copy.deepcopy(column))
            for row in target.rows:
                row[column.name] = backfill_value(column, self._identity)
            self._touch(target)
            scope.mark_dirty()

        logger.info("column_added", schema=schema, table=table, column=column.name)
        return True

    def remove_column(self, schema: str, table: str, column_name: str) -> bool:
        """Remove a column and delete its key from every row."""
        with self._mutation() as scope:
            target = self._database.get_table(schema, table)
            column = target.get_column(column_name) if target is not None else None
            if target is None or column is None:
                logger.info(
                    "remove_column_rejected",
                    schema=schema,
                    table=table,
                    column=column_name,
                    reason=ErrorKind.NOT_FOUND.value,
                )
                return False

            target.columns.remove(column)
            for row in target.rows:
                row.pop(column_name, None)
            self._touch(target)
            scope.mark_dirty()

        logger.info("column_removed", schema=schema, table=table, column=column_name)
        return True

    # Row operations

    def insert(self, schema: str, table: str, data: Mapping[str, Any]) -> QueryResult:
        """Insert one row.

        Each declared column takes the explicit value from `data`, else its
        default, else an auto-increment value, else None. Keys of `data`
        that are not declared columns are dropped.
        """
        start = time.perf_counter()
        with self._mutation() as scope:
            target = self._database.get_table(schema, table)
            if target is None:
                return self._observe("insert", _not_found(schema, table, start), start)

            row = build_row(target, data, self._identity)
            target.rows.append(row)
            self._touch(target)
            scope.mark_dirty()
            inserted = copy.deepcopy(row)

        result = QueryResult(
            success=True, data=[inserted], rows_affected=1, execution_time=_elapsed_ms(start)
        )
        return self._observe("insert", result, start)

    def select(
        self, schema: str, table: str, options: SelectOptions | None = None
    ) -> QueryResult:
        """Filter, sort and page the rows of a table.

        The filter is applied first, then the ordering, then OFFSET and
        finally LIMIT.
        """
        start = time.perf_counter()
        with self._lock:
            target = self._database.get_table(schema, table)
            if target is None:
                return self._observe("select", _not_found(schema, table, start), start)
            rows = execute_select(target, options or SelectOptions())

        result = QueryResult(
            success=True, data=rows, rows_affected=len(rows), execution_time=_elapsed_ms(start)
        )
        return self._observe("select", result, start)

    def update(
        self, schema: str, table: str, where: Mapping[str, Any], data: Mapping[str, Any]
    ) -> QueryResult:
        """Merge `data` into every row matching `where`.

        Nothing is persisted when no row matches.
        """
        start = time.perf_counter()
        with self._mutation() as scope:
            target = self._database.get_table(schema, table)
            if target is None:
                return self._observe("update", _not_found(schema, table, start), start)

            rows_affected = 0
            for row in target.rows:
                if matches_where(row, where):
                    row.update(copy.deepcopy(dict(data)))
                    rows_affected += 1

            if rows_affected > 0:
                self._touch(target)
                scope.mark_dirty()

        result = QueryResult(
            success=True, rows_affected=rows_affected, execution_time=_elapsed_ms(start)
        )
        return self._observe("update", result, start)

    def delete(self, schema: str, table: str, where: Mapping[str, Any]) -> QueryResult:
        """Remove every row matching `where`.

        Nothing is persisted when no row matches.
        """
        start = time.perf_counter()
        with self._mutation() as scope:
            target = self._database.get_table(schema, table)
            if target is None:
                return self._observe("delete", _not_found(schema, table, start), start)

            initial_count = len(target.rows)
            target.rows = [row for row in target.rows if not matches_where(row, where)]
            rows_affected = initial_count - len(target.rows)

            if rows_affected > 0:
                self._touch(target)
                scope.mark_dirty()

        result = QueryResult(
            success=True, rows_affected=rows_affected, execution_time=_elapsed_ms(start)
        )
        return self._observe("delete", result, start)

    # SQL

    async def execute_sql(self, sql: str) -> QueryResult:
        """Execute a CREATE TABLE or SELECT ... FROM statement.

        The call first awaits the simulated network delay. Unsupported and
        malformed statements, and any unexpected error while running the
        statement, are reported in the result rather than raised.
        """
        start = time.perf_counter()
        await asyncio.sleep(self._sql_delay_seconds)

        statement_type = self._parser.classify(sql)
        kind = statement_type.value if statement_type else "unsupported"

        with bound_context(statement_kind=kind), trace_span(
            "execute_sql", {"statement.kind": kind}
        ):
            try:
                statement = self._parser.parse(sql)
            except UnsupportedStatementError as e:
                self._count_statement("unsupported")
                result = QueryResult.failure(str(e), ErrorKind.UNSUPPORTED_STATEMENT)
                return self._observe("execute_sql", result, start)
            except MalformedStatementError as e:
                self._count_statement("malformed")
                logger.info("statement_malformed", error=str(e))
                result = QueryResult.failure(
                    f"Malformed statement: {e}", ErrorKind.MALFORMED_STATEMENT
                )
                return self._observe("execute_sql", result, start)

            self._count_statement(kind)
            try:
                result = self._run_statement(statement, start)
            except Exception as e:
                logger.exception("statement_failed", error=str(e))
                result = QueryResult.failure(str(e), ErrorKind.INTERNAL, _elapsed_ms(start))
            return self._observe("execute_sql", result, start)

    def _run_statement(self, statement: Statement, start: float) -> QueryResult:
        if isinstance(statement, CreateTableStatement):
            now = self._identity.now()
            table = Table(
                id=self._identity.new_id(),
                name=statement.table,
                schema=statement.schema,
                columns=[
                    Column(
                        name=spec.name,
                        type=spec.type,
                        nullable=spec.nullable,
                        primary=spec.primary,
                        unique=spec.unique,
                        length=spec.length,
                    )
                    for spec in statement.columns
                ],
                created_at=now,
                updated_at=now,
            )
            error = self._create_table(statement.schema, table)
            if error is ErrorKind.INVALID:
                problem = table.validate() or "invalid table definition"
                return QueryResult.failure(problem, ErrorKind.INVALID, _elapsed_ms(start))
            return QueryResult(
                success=True, data=[], rows_affected=0, execution_time=_elapsed_ms(start)
            )

        if isinstance(statement, SelectStatement):
            return self.select(statement.schema, statement.table)

        raise TypeError(f"Unhandled statement type: {type(statement).__name__}")

    def _count_statement(self, kind: str) -> None:
        if self._metrics:
            self._metrics.statements_total.labels(kind=kind).inc()

    def explain_query(self, sql: str) -> QueryExplanation:
        """Describe a statement's plan.

        This is a planner stub: the plan, cost and index list are fixed
        placeholders regardless of the statement.
        """
        return QueryExplanation(
            plan=list(EXPLAIN_PLAN),
            estimated_cost=EXPLAIN_COST,
            indexes_used=list(EXPLAIN_INDEXES),
            warnings=[],
        )

    # Query history

    def get_query_history(self) -> list[str]:
        """Return saved statements, most recent first."""
        with self._lock:
            history = self._store.load(self._history_key)
        if not isinstance(history, list):
            return []
        return [str(entry) for entry in history]

    def save_query_to_history(self, sql: str) -> None:
        """Push a statement to the front of the history, dropping the oldest past the cap."""
        with self._lock:
            history = self.get_query_history()
            history.insert(0, sql)
            while len(history) > self._history_limit:
                history.pop()
            self._store.save(self._history_key, history)

    def clear_query_history(self) -> None:
        with self._lock:
            self._store.delete(self._history_key)

    # Stats

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with schema, table and row counts.
        """
        with self._lock:
            tables = {
                f"{table.schema}.{table.name}": table.row_count
                for table in self._database.iter_tables()
            }
            return {
                "schemas": len(self._database.schemas),
                "tables": len(tables),
                "rows": sum(tables.values()),
                "row_counts": tables,
                "history": len(self.get_query_history()),
            }

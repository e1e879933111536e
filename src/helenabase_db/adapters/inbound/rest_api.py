"""REST API adapter for the relational store.

This module provides a FastAPI-based REST API over the DatabaseEngine:
catalog management, row operations, the SQL entry point and the query
history used by the console's SQL editor.

Endpoints:
    GET    /health                                   - Health check
    GET    /stats                                    - Store statistics
    GET    /schemas                                  - Schema names
    GET    /schemas/{schema}/tables                  - Tables of a schema
    POST   /schemas/{schema}/tables                  - Create a table
    GET    /schemas/{schema}/tables/{name}           - One table
    DELETE /schemas/{schema}/tables/{name}           - Drop a table
    POST   /schemas/{schema}/tables/{name}/columns   - Add a column
    DELETE /schemas/{schema}/tables/{name}/columns/{column} - Remove a column
    POST   /schemas/{schema}/tables/{name}/rows      - Insert a row
    POST   /schemas/{schema}/tables/{name}/rows/query  - Select rows
    PATCH  /schemas/{schema}/tables/{name}/rows      - Update rows
    POST   /schemas/{schema}/tables/{name}/rows/delete - Delete rows
    POST   /sql                                      - Execute a statement
    POST   /sql/explain                              - Explain a statement
    GET    /sql/history                              - Saved statements
    DELETE /sql/history                              - Clear saved statements

Usage:
    from helenabase_db.adapters.inbound.rest_api import create_app

    app = create_app(engine)
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 8000

References:
    - FastAPI documentation: https://fastapi.tiangolo.com/
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from helenabase_db import __version__
from helenabase_db.application import DatabaseEngine
from helenabase_db.domain.entities import Column, Index, Policy, Table
from helenabase_db.domain.value_objects import (
    ColumnType,
    ErrorKind,
    PolicyOperation,
    SortDirection,
    default_from_wire,
)
from helenabase_db.infrastructure.logging import get_logger
from helenabase_db.ports.inbound import OrderBy, QueryResult, SelectOptions

logger = get_logger(__name__)


class ColumnModel(BaseModel):
    """Request model for a column declaration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Column name")
    type: str = Field("TEXT", description="Column type, e.g. VARCHAR or INTEGER")
    nullable: bool = Field(True, description="Whether NULL is allowed")
    default: Any = Field(
        None, description="Literal default, or gen_random_uuid() / now()"
    )
    primary: bool = Field(False, description="Primary key flag")
    unique: bool = Field(False, description="Unique flag")
    auto_increment: bool = Field(False, alias="autoIncrement", description="Auto-increment flag")
    length: int | None = Field(None, gt=0, description="Length constraint")

    def to_column(self) -> Column:
        return Column(
            name=self.name,
            type=ColumnType.parse(self.type),
            nullable=self.nullable,
            default=default_from_wire(self.default) if self.default is not None else None,
            primary=self.primary,
            unique=self.unique,
            auto_increment=self.auto_increment,
            length=self.length,
        )


class IndexModel(BaseModel):
    """Request model for an index declaration."""

    name: str = Field(..., min_length=1, description="Index name")
    columns: list[str] = Field(default_factory=list, description="Indexed columns")
    unique: bool = Field(False, description="Unique flag")


class PolicyModel(BaseModel):
    """Request model for a row-level policy declaration."""

    id: str = Field(..., min_length=1, description="Policy identifier")
    name: str = Field(..., min_length=1, description="Policy name")
    type: PolicyOperation = Field(..., description="Guarded operation")
    using: str = Field("", description="USING expression")
    check: str | None = Field(None, description="WITH CHECK expression")


class TableRequest(BaseModel):
    """Request model for table creation."""

    name: str = Field(..., min_length=1, description="Table name")
    columns: list[ColumnModel] = Field(default_factory=list, description="Columns")
    indexes: list[IndexModel] = Field(default_factory=list, description="Indexes")
    policies: list[PolicyModel] = Field(default_factory=list, description="Policies")

    def to_table(self, schema: str) -> Table:
        return Table(
            id="",
            name=self.name,
            schema=schema,
            columns=[c.to_column() for c in self.columns],
            indexes=[Index(name=i.name, columns=i.columns, unique=i.unique) for i in self.indexes],
            policies=[
                Policy(id=p.id, name=p.name, type=p.type, using=p.using, check=p.check)
                for p in self.policies
            ],
        )


class OrderByModel(BaseModel):
    """One ORDER BY key."""

    column: str = Field(..., min_length=1, description="Column to sort by")
    direction: SortDirection = Field(SortDirection.ASC, description="ASC or DESC")


class SelectRequest(BaseModel):
    """Request model for select."""

    model_config = ConfigDict(populate_by_name=True)

    where: dict[str, Any] | None = Field(None, description="Equality filter")
    order_by: list[OrderByModel] = Field(
        default_factory=list, alias="orderBy", description="Sort keys"
    )
    limit: int | None = Field(None, ge=0, description="Maximum rows")
    offset: int = Field(0, ge=0, description="Rows to skip")

    def to_options(self) -> SelectOptions:
        return SelectOptions(
            where=self.where,
            order_by=[OrderBy(o.column, o.direction) for o in self.order_by],
            limit=self.limit,
            offset=self.offset,
        )


class UpdateRequest(BaseModel):
    """Request model for update."""

    where: dict[str, Any] = Field(default_factory=dict, description="Equality filter")
    data: dict[str, Any] = Field(..., description="Values to merge into matching rows")


class DeleteRequest(BaseModel):
    """Request model for delete."""

    where: dict[str, Any] = Field(default_factory=dict, description="Equality filter")


class SQLRequest(BaseModel):
    """Request model for SQL execution."""

    sql: str = Field(..., description="SQL statement to execute")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


def _result_payload(result: QueryResult) -> dict[str, Any]:
    """Convert a QueryResult to its wire shape, raising 404 for missing tables."""
    if result.error_kind is ErrorKind.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.error)
    payload = result.to_dict()
    if result.error_kind is not None:
        payload["errorKind"] = result.error_kind.value
    return payload


def _require_table(db: DatabaseEngine, schema: str, name: str) -> Table:
    table = db.get_table(schema, name)
    if table is None:
        raise HTTPException(status_code=404, detail=f"Table {schema}.{name} not found")
    return table


def create_app(db: DatabaseEngine) -> FastAPI:
    """Create a FastAPI application for the relational store.

    Args:
        db: The engine to serve.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="HelenaBase Database API",
        description="REST API for the HelenaBase relational store",
        version=__version__,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get("/stats", tags=["Stats"])
    async def get_stats() -> dict[str, Any]:
        """Get store statistics."""
        return db.get_stats()

    # Catalog

    @app.get("/schemas", tags=["Catalog"])
    async def list_schemas() -> list[str]:
        return db.get_schemas()

    @app.get("/schemas/{schema}/tables", tags=["Catalog"])
    async def list_tables(schema: str) -> list[dict[str, Any]]:
        return [table.to_dict() for table in db.get_tables(schema)]

    @app.post("/schemas/{schema}/tables", status_code=201, tags=["Catalog"])
    async def create_table(schema: str, request: TableRequest) -> dict[str, Any]:
        """Create a table, implicitly creating the schema."""
        try:
            table = request.to_table(schema)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        if not db.create_table(schema, table):
            if db.get_table(schema, request.name) is not None:
                raise HTTPException(
                    status_code=409, detail=f"Table {schema}.{request.name} already exists"
                )
            raise HTTPException(
                status_code=422, detail=table.validate() or "Invalid table definition"
            )
        return _require_table(db, schema, request.name).to_dict()

    @app.get("/schemas/{schema}/tables/{name}", tags=["Catalog"])
    async def get_table(schema: str, name: str) -> dict[str, Any]:
        return _require_table(db, schema, name).to_dict()

    @app.delete("/schemas/{schema}/tables/{name}", tags=["Catalog"])
    async def drop_table(schema: str, name: str) -> dict[str, str]:
        if not db.drop_table(schema, name):
            raise HTTPException(status_code=404, detail=f"Table {schema}.{name} not found")
        return {"message": f"Table {schema}.{name} dropped"}

    @app.post("/schemas/{schema}/tables/{name}/columns", status_code=201, tags=["Catalog"])
    async def add_column(schema: str, name: str, request: ColumnModel) -> dict[str, Any]:
        """Add a column and backfill existing rows."""
        try:
            column = request.to_column()
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        if not db.add_column(schema, name, column):
            table = _require_table(db, schema, name)
            if table.has_column(column.name):
                raise HTTPException(
                    status_code=409, detail=f"Column {column.name} already exists"
                )
            raise HTTPException(
                status_code=422, detail=f"Table {schema}.{name} already has a primary column"
            )
        return _require_table(db, schema, name).to_dict()

    @app.delete("/schemas/{schema}/tables/{name}/columns/{column}", tags=["Catalog"])
    async def remove_column(schema: str, name: str, column: str) -> dict[str, Any]:
        if not db.remove_column(schema, name, column):
            _require_table(db, schema, name)
            raise HTTPException(status_code=404, detail=f"Column {column} not found")
        return _require_table(db, schema, name).to_dict()

    # Rows

    @app.post("/schemas/{schema}/tables/{name}/rows", tags=["Rows"])
    async def insert_row(schema: str, name: str, data: dict[str, Any]) -> dict[str, Any]:
        return _result_payload(db.insert(schema, name, data))

    @app.post("/schemas/{schema}/tables/{name}/rows/query", tags=["Rows"])
    async def select_rows(schema: str, name: str, request: SelectRequest) -> dict[str, Any]:
        return _result_payload(db.select(schema, name, request.to_options()))

    @app.patch("/schemas/{schema}/tables/{name}/rows", tags=["Rows"])
    async def update_rows(schema: str, name: str, request: UpdateRequest) -> dict[str, Any]:
        return _result_payload(db.update(schema, name, request.where, request.data))

    @app.post("/schemas/{schema}/tables/{name}/rows/delete", tags=["Rows"])
    async def delete_rows(schema: str, name: str, request: DeleteRequest) -> dict[str, Any]:
        return _result_payload(db.delete(schema, name, request.where))

    # SQL

    @app.post("/sql", tags=["SQL"])
    async def execute_sql(request: SQLRequest) -> dict[str, Any]:
        """Execute a statement; successful statements are saved to the history."""
        result = await db.execute_sql(request.sql)
        if result.success:
            db.save_query_to_history(request.sql)
        payload = result.to_dict()
        if result.error_kind is not None:
            payload["errorKind"] = result.error_kind.value
        return payload

    @app.post("/sql/explain", tags=["SQL"])
    async def explain_sql(request: SQLRequest) -> dict[str, Any]:
        return db.explain_query(request.sql).to_dict()

    @app.get("/sql/history", tags=["SQL"])
    async def get_history() -> list[str]:
        return db.get_query_history()

    @app.delete("/sql/history", tags=["SQL"])
    async def clear_history() -> dict[str, str]:
        db.clear_query_history()
        return {"message": "Query history cleared"}

    return app


def run_server(
    db: DatabaseEngine,
    host: str = "0.0.0.0",
    port: int = 8000,
) -> None:
    """Run the REST API server.

    Args:
        db: The engine.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(db)
    logger.info("rest_api_starting", host=host, port=port)
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    """Build the engine from the environment configuration and serve it."""
    from helenabase_db.infrastructure.config import get_config
    from helenabase_db.infrastructure.container import build_container
    from helenabase_db.infrastructure.logging import configure_logging
    from helenabase_db.infrastructure.metrics import setup_metrics
    from helenabase_db.infrastructure.tracing import setup_tracing

    config = get_config()
    configure_logging(config.observability)
    setup_tracing(
        service_name=config.observability.otel_service_name,
        otlp_endpoint=config.observability.otel_endpoint,
    )
    setup_metrics(port=config.server.metrics_port)

    container = build_container(config)
    run_server(container.resolve(DatabaseEngine), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()

"""Application layer for the relational store.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    DatabaseEngine:
        - DatabaseEngine: Main entry point for the relational store
        - default_users_table: The table seeded into a fresh database
    Executor:
        - Operator: Base class for select pipeline operators
        - SeqScanOperator, FilterOperator, SortOperator, LimitOperator
        - build_select_pipeline, execute_select
"""

from helenabase_db.application.database_engine import DatabaseEngine, default_users_table
from helenabase_db.application.executor import (
    FilterOperator,
    LimitOperator,
    Operator,
    SeqScanOperator,
    SortOperator,
    build_select_pipeline,
    execute_select,
)

__all__ = [
    "DatabaseEngine",
    "default_users_table",
    "Operator",
    "SeqScanOperator",
    "FilterOperator",
    "SortOperator",
    "LimitOperator",
    "build_select_pipeline",
    "execute_select",
]

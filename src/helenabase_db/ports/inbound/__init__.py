"""Inbound ports - API contracts for the relational store.

Inbound ports define the interfaces that the presentation layer
uses to interact with the engine.
"""

from helenabase_db.ports.inbound.relational_store import (
    OrderBy,
    QueryExplanation,
    QueryResult,
    RelationalStore,
    SelectOptions,
)

__all__ = [
    "RelationalStore",
    "QueryResult",
    "QueryExplanation",
    "SelectOptions",
    "OrderBy",
]

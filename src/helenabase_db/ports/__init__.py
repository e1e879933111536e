"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (RelationalStore)
- Outbound ports: Dependencies on external systems (KeyValueStore,
  IdentityGenerator)

Adapters implement these ports with concrete functionality.
"""

from helenabase_db.ports.inbound import (
    OrderBy,
    QueryExplanation,
    QueryResult,
    RelationalStore,
    SelectOptions,
)
from helenabase_db.ports.outbound import IdentityGenerator, KeyValueStore, StorageError

__all__ = [
    # Inbound ports
    "RelationalStore",
    "QueryResult",
    "QueryExplanation",
    "SelectOptions",
    "OrderBy",
    # Outbound ports
    "IdentityGenerator",
    "KeyValueStore",
    "StorageError",
]

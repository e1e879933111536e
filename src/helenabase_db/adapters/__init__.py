"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (SQL text, REST)
- Outbound adapters: Implement external dependencies (key-value storage, clock)
"""

from helenabase_db.adapters.outbound import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SystemIdentityGenerator,
)

__all__ = [
    # Outbound adapters
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SystemIdentityGenerator",
]

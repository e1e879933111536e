"""Outbound adapters - implementations of outbound ports."""

from helenabase_db.adapters.outbound.json_file_store import JsonFileKeyValueStore
from helenabase_db.adapters.outbound.memory_store import InMemoryKeyValueStore
from helenabase_db.adapters.outbound.system_identity import (
    SystemIdentityGenerator,
    iso_timestamp,
)

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SystemIdentityGenerator",
    "iso_timestamp",
]

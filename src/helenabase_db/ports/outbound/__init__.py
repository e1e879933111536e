"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
relational store depends on: snapshot persistence and identity/clock.
"""

from helenabase_db.ports.outbound.identity_generator import IdentityGenerator
from helenabase_db.ports.outbound.key_value_store import KeyValueStore, StorageError

__all__ = [
    "IdentityGenerator",
    "KeyValueStore",
    "StorageError",
]

"""Key-value store port for snapshot persistence.

This outbound port is the engine's only view of durable storage: a
synchronous blob store addressed by string keys. The engine keeps the
whole database under one key and the query history under another, and
always reads or writes a value as a whole.

Values are JSON-compatible (dicts, lists, strings, numbers, booleans,
None). Implementations must not hand out references that alias engine
state: a value read back must be a fresh copy.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol


class StorageError(Exception):
    """Persisted data could not be read or written."""

    pass


class KeyValueStore(Protocol):
    """Protocol for whole-value persistence.

    Thread Safety:
        Implementations must make each call atomic with respect to the
        others; the engine serializes its own calls.
    """

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """Read the value stored under a key.

        Args:
            key: Storage key.

        Returns:
            The stored value, or None if nothing is stored.

        Raises:
            StorageError: If the stored data cannot be decoded.
        """
        ...

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Replace the value stored under a key.

        Args:
            key: Storage key.
            value: JSON-compatible value.

        Raises:
            StorageError: If the value cannot be encoded or written.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""
        ...

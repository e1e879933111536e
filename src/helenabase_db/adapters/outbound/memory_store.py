"""In-memory key-value store.

Values are kept JSON-encoded so that every load returns a fresh copy and
anything that cannot be persisted fails at save time, exactly as it would
with the file backend.
"""

from __future__ import annotations

import json
import threading
from typing import Any

from helenabase_db.ports.outbound import StorageError


class InMemoryKeyValueStore:
    """Dict-backed implementation of the KeyValueStore protocol."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional values to pre-populate, keyed by storage key.
        """
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Any | None:
        with self._lock:
            encoded = self._data.get(key)
        if encoded is None:
            return None
        return json.loads(encoded)

    def save(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for key '{key}' is not JSON serializable: {e}") from e
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

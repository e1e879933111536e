"""File-based key-value store.

This adapter implements the KeyValueStore protocol with one JSON file per
key inside a data directory:

    <data_dir>/<key>.json

Writes go to a temporary file in the same directory which is then renamed
over the target, so a reader never observes a half-written snapshot.

Thread Safety:
    All operations on one store instance are serialized by a lock.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Any

from helenabase_db.infrastructure.logging import get_logger
from helenabase_db.ports.outbound import StorageError

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileKeyValueStore:
    """Directory-of-JSON-files implementation of the KeyValueStore protocol.

    Attributes:
        data_dir: Directory holding one file per key.
    """

    def __init__(self, data_dir: str | Path, fsync: bool = True) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory for the key files (created if missing).
            fsync: Flush each write to stable storage before renaming.
        """
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._fsync = fsync
        self._lock = threading.Lock()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Return the file path backing a key.

        Raises:
            ValueError: If the key is not a safe file name.
        """
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Any | None:
        path = self.path_for(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                raise StorageError(f"Failed to read {path}: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("snapshot_decode_failed", key=key, path=str(path), error=str(e))
            raise StorageError(f"Corrupted data for key '{key}': {e}") from e

    def save(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            encoded = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for key '{key}' is not JSON serializable: {e}") from e

        with self._lock:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self._data_dir
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(encoded)
                    f.flush()
                    if self._fsync:
                        os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except OSError as e:
                Path(tmp_name).unlink(missing_ok=True)
                raise StorageError(f"Failed to write {path}: {e}") from e

        logger.debug("key_saved", key=key, bytes=len(encoded))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        with self._lock:
            path.unlink(missing_ok=True)

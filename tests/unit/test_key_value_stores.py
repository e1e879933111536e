"""Unit tests for the key-value store adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from helenabase_db.adapters.outbound import InMemoryKeyValueStore, JsonFileKeyValueStore
from helenabase_db.ports.outbound import StorageError


@pytest.mark.unit
class TestInMemoryKeyValueStore:
    """Tests for InMemoryKeyValueStore."""

    def test_missing_key(self) -> None:
        assert InMemoryKeyValueStore().load("nope") is None

    def test_save_and_load(self) -> None:
        store = InMemoryKeyValueStore()
        store.save("k", {"a": [1, 2]})

        assert store.load("k") == {"a": [1, 2]}
        assert "k" in store
        assert store.keys() == ["k"]

    def test_load_returns_copy(self) -> None:
        store = InMemoryKeyValueStore({"k": {"a": 1}})
        value = store.load("k")
        value["a"] = 2

        assert store.load("k") == {"a": 1}

    def test_unserializable_value(self) -> None:
        with pytest.raises(StorageError):
            InMemoryKeyValueStore().save("k", {"a": object()})

    def test_delete(self) -> None:
        store = InMemoryKeyValueStore({"k": 1})
        store.delete("k")
        store.delete("k")

        assert store.load("k") is None


@pytest.mark.unit
class TestJsonFileKeyValueStore:
    """Tests for JsonFileKeyValueStore."""

    def test_creates_directory(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir / "nested" / "data")

        assert store.data_dir.is_dir()

    def test_save_and_load(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir, fsync=False)
        store.save("helenabase_database", {"public": {}})

        assert store.path_for("helenabase_database").exists()
        assert store.load("helenabase_database") == {"public": {}}

    def test_survives_new_instance(self, temp_dir: Path) -> None:
        JsonFileKeyValueStore(temp_dir).save("history", ["SELECT 1"])

        assert JsonFileKeyValueStore(temp_dir).load("history") == ["SELECT 1"]

    def test_no_temp_files_left(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir, fsync=False)
        store.save("k", 1)
        store.save("k", 2)

        assert [p.name for p in temp_dir.iterdir()] == ["k.json"]

    def test_corrupted_file(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir)
        store.path_for("k").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError, match="Corrupted"):
            store.load("k")

    def test_invalid_key(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir)

        with pytest.raises(ValueError):
            store.path_for("../escape")
        with pytest.raises(ValueError):
            store.path_for("..")

    def test_unserializable_value(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir)

        with pytest.raises(StorageError):
            store.save("k", {1, 2})
        assert store.load("k") is None

    def test_delete(self, temp_dir: Path) -> None:
        store = JsonFileKeyValueStore(temp_dir)
        store.save("k", 1)
        store.delete("k")
        store.delete("k")

        assert store.load("k") is None

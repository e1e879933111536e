"""Unit tests for dependency wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from helenabase_db.adapters.outbound import InMemoryKeyValueStore, JsonFileKeyValueStore
from helenabase_db.application import DatabaseEngine
from helenabase_db.infrastructure.config import Config, EngineConfig, StorageConfig
from helenabase_db.infrastructure.container import (
    Container,
    build_container,
    get_container,
    reset_container,
)
from helenabase_db.infrastructure.metrics import MetricsRegistry
from helenabase_db.ports.outbound import KeyValueStore


@pytest.mark.unit
class TestContainer:
    """Tests for Container."""

    def test_singleton(self, container: Container) -> None:
        container.register_singleton(str, "value")

        assert container.resolve(str) == "value"
        assert container.has(str)

    def test_factory_called_once(self, container: Container) -> None:
        calls = []
        container.register_factory(list, lambda c: calls.append(1) or ["x"])

        assert container.resolve(list) is container.resolve(list)
        assert calls == [1]

    def test_missing(self, container: Container) -> None:
        with pytest.raises(KeyError):
            container.resolve(int)

    def test_rebinding_replaces_instance(self, container: Container) -> None:
        container.register_factory(str, lambda c: "first")
        container.resolve(str)
        container.register_factory(str, lambda c: "second")

        assert container.resolve(str) == "second"

    def test_global_container(self) -> None:
        reset_container()
        first = get_container()

        assert get_container() is first
        reset_container()
        assert get_container() is not first


@pytest.mark.unit
class TestBuildContainer:
    """Tests for build_container."""

    def test_file_backend(
        self, container: Container, test_config: Config, metrics_registry: MetricsRegistry
    ) -> None:
        container.register_singleton(MetricsRegistry, metrics_registry)
        build_container(test_config, container=container)

        store = container.resolve(KeyValueStore)
        engine = container.resolve(DatabaseEngine)

        assert isinstance(store, JsonFileKeyValueStore)
        assert engine.get_table("public", "users") is not None
        assert (test_config.storage.data_dir / "helenabase_database.json").exists()

    def test_memory_backend_and_engine_settings(
        self, container: Container, temp_dir: Path, metrics_registry: MetricsRegistry
    ) -> None:
        config = Config(
            storage=StorageConfig(backend="memory", data_dir=temp_dir, history_limit=2),
            engine=EngineConfig(default_schema="app", seed_defaults=False),
        )
        container.register_singleton(MetricsRegistry, metrics_registry)
        build_container(config, container=container)

        engine = container.resolve(DatabaseEngine)
        for i in range(3):
            engine.save_query_to_history(f"SELECT {i}")

        assert isinstance(container.resolve(KeyValueStore), InMemoryKeyValueStore)
        assert engine.default_schema == "app"
        assert engine.get_schemas() == ["app"]
        assert engine.get_query_history() == ["SELECT 2", "SELECT 1"]

    def test_preregistered_store_kept(
        self, container: Container, test_config: Config, metrics_registry: MetricsRegistry
    ) -> None:
        store = InMemoryKeyValueStore()
        container.register_singleton(KeyValueStore, store)
        container.register_singleton(MetricsRegistry, metrics_registry)
        build_container(test_config, container=container)

        container.resolve(DatabaseEngine)

        assert "helenabase_database" in store

"""Pytest configuration and fixtures for helenabase_db tests."""

from __future__ import annotations

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Generator

import pytest
from prometheus_client import CollectorRegistry

from helenabase_db.adapters.outbound import InMemoryKeyValueStore, iso_timestamp
from helenabase_db.application import DatabaseEngine
from helenabase_db.infrastructure.config import Config, EngineConfig, StorageConfig
from helenabase_db.infrastructure.container import Container, reset_container
from helenabase_db.infrastructure.metrics import MetricsRegistry
from helenabase_db.ports.outbound import StorageError


class FakeIdentityGenerator:
    """Deterministic identifiers and a clock that ticks one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self._counter = 0
        self._clock = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def new_id(self) -> str:
        self._counter += 1
        return f"id-{self._counter}"

    def now(self) -> str:
        self._clock += timedelta(seconds=1)
        return iso_timestamp(self._clock)


class RecordingStore(InMemoryKeyValueStore):
    """In-memory store that records saves and can be told to fail them."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.saves: list[str] = []
        self.fail_saves = False
        super().__init__(initial)

    def save(self, key: str, value: Any) -> None:
        if self.fail_saves:
            raise StorageError(f"save of '{key}' rejected")
        super().save(key, value)
        self.saves.append(key)

    def save_count(self, key: str) -> int:
        return self.saves.count(key)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(
        storage=StorageConfig(backend="file", data_dir=temp_dir / "data"),
        engine=EngineConfig(sql_delay_seconds=0.0),
    )


@pytest.fixture
def container() -> Generator[Container, None, None]:
    """Provide a fresh DI container for each test."""
    reset_container()
    c = Container()
    yield c
    c.clear()


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def identity() -> FakeIdentityGenerator:
    return FakeIdentityGenerator()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def engine(
    store: RecordingStore,
    identity: FakeIdentityGenerator,
    metrics_registry: MetricsRegistry,
) -> DatabaseEngine:
    """Provide an engine over a recording store with no simulated delay."""
    return DatabaseEngine(
        store,
        identity,
        metrics=metrics_registry,
        sql_delay_seconds=0.0,
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")

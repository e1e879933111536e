"""Dependency injection container."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from helenabase_db.infrastructure.config import Config

T = TypeVar("T")


class Container:
    """
    Type-keyed registry of the store's collaborators.

    An interface is bound either to a ready instance or to a factory that
    receives the container and runs at most once, on first resolve.
    """

    def __init__(self) -> None:
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """Bind an interface to an existing instance."""
        self._factories.pop(interface, None)
        self._instances[interface] = instance

    def register_factory(
        self,
        interface: type[T],
        factory: Callable[[Container], T],
    ) -> None:
        """Bind an interface to a lazily invoked factory.

        Rebinding drops any instance the previous registration produced.
        """
        self._instances.pop(interface, None)
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """
        Return the instance bound to an interface.

        Raises:
            KeyError: If nothing is bound to the interface
        """
        if interface not in self._instances:
            try:
                factory = self._factories[interface]
            except KeyError:
                raise KeyError(f"No registration found for {interface.__name__}") from None
            self._instances[interface] = factory(self)
        return self._instances[interface]

    def has(self, interface: type) -> bool:
        return interface in self._instances or interface in self._factories

    def clear(self) -> None:
        """Drop every registration and resolved instance."""
        self._factories.clear()
        self._instances.clear()


def build_container(
    config: Config,
    *,
    container: Container | None = None,
) -> Container:
    """Register the store, identity, metrics and engine for a configuration.

    Registrations already present in the container are kept, so tests can
    pre-register fakes (for example an in-memory store or a metrics
    registry bound to a private CollectorRegistry).

    Args:
        config: Configuration to build from.
        container: Container to populate (defaults to a new one).

    Returns:
        The populated container. Resolving DatabaseEngine loads the
        snapshot and seeds the default tables.
    """
    from helenabase_db.adapters.outbound import (
        InMemoryKeyValueStore,
        JsonFileKeyValueStore,
        SystemIdentityGenerator,
    )
    from helenabase_db.application import DatabaseEngine
    from helenabase_db.infrastructure.metrics import MetricsRegistry, get_metrics
    from helenabase_db.ports.outbound import IdentityGenerator, KeyValueStore

    container = container or Container()

    if not container.has(Config):
        container.register_singleton(Config, config)

    if not container.has(KeyValueStore):
        if config.storage.backend == "memory":
            container.register_factory(KeyValueStore, lambda c: InMemoryKeyValueStore())
        else:
            container.register_factory(
                KeyValueStore,
                lambda c: JsonFileKeyValueStore(c.resolve(Config).storage.data_dir),
            )

    if not container.has(IdentityGenerator):
        container.register_factory(IdentityGenerator, lambda c: SystemIdentityGenerator())

    if not container.has(MetricsRegistry):
        container.register_factory(MetricsRegistry, lambda c: get_metrics())

    def _engine(c: Container) -> DatabaseEngine:
        cfg = c.resolve(Config)
        return DatabaseEngine(
            c.resolve(KeyValueStore),
            c.resolve(IdentityGenerator),
            metrics=c.resolve(MetricsRegistry),
            snapshot_key=cfg.storage.snapshot_key,
            history_key=cfg.storage.history_key,
            history_limit=cfg.storage.history_limit,
            sql_delay_seconds=cfg.engine.sql_delay_seconds,
            default_schema=cfg.engine.default_schema,
            seed_defaults=cfg.engine.seed_defaults,
        )

    if not container.has(DatabaseEngine):
        container.register_factory(DatabaseEngine, _engine)

    return container


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """Get the global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    if _container is not None:
        _container.clear()
    _container = None

"""Prometheus metrics for the relational store."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all relational store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "helenabase_operations_total",
            "Total number of store operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "helenabase_operation_latency_seconds",
            "Store operation latency in seconds",
            ["operation"],  # insert, select, update, delete, execute_sql
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_affected_total = Counter(
            "helenabase_rows_affected_total",
            "Total rows returned or modified",
            ["operation"],
            registry=self._registry,
        )

        # Statement metrics
        self.statements_total = Counter(
            "helenabase_statements_total",
            "SQL statements by recognized kind",
            ["kind"],  # create_table, select, unsupported, malformed
            registry=self._registry,
        )

        # Persistence metrics
        self.snapshot_writes_total = Counter(
            "helenabase_snapshot_writes_total",
            "Total snapshot write-backs",
            registry=self._registry,
        )

        self.snapshot_restores_total = Counter(
            "helenabase_snapshot_restores_total",
            "Mutations rolled back to the last persisted snapshot",
            registry=self._registry,
        )

        # Catalog metrics
        self.tables = Gauge(
            "helenabase_tables",
            "Number of tables across all schemas",
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "helenabase_db",
            "Relational store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def observe_operation(
        self, operation: str, success: bool, seconds: float, rows: int = 0
    ) -> None:
        """Record one completed operation."""
        status = "success" if success else "error"
        self.operations_total.labels(operation=operation, status=status).inc()
        self.operation_latency_seconds.labels(operation=operation).observe(seconds)
        if rows:
            self.rows_affected_total.labels(operation=operation).inc(rows)


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from helenabase_db import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics

"""Infrastructure layer - cross-cutting concerns."""

from helenabase_db.infrastructure.config import Config, get_config
from helenabase_db.infrastructure.logging import configure_logging, get_logger, setup_logging
from helenabase_db.infrastructure.metrics import MetricsRegistry, setup_metrics
from helenabase_db.infrastructure.tracing import get_tracer, setup_tracing, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "configure_logging",
    "get_logger",
    "setup_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]

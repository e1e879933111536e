"""OpenTelemetry tracing for the relational store.

Spans are named after store operations (for example `execute_sql`) and
carry attributes under the `helenabase.` namespace. Without a call to
setup_tracing the global no-op provider is used, so spans cost nothing in
tests and embedded use.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

ATTRIBUTE_PREFIX = "helenabase."

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None


def setup_tracing(
    service_name: str = "helenabase_db",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider for the service.

    Args:
        service_name: Reported as `service.name`
        otlp_endpoint: OTLP gRPC collector endpoint (e.g., "http://localhost:4317")
        console_export: Also print finished spans to stdout

    Returns:
        The service tracer
    """
    global _tracer, _provider

    from helenabase_db import __version__

    _provider = TracerProvider(
        resource=Resource.create(
            {"service.name": service_name, "service.version": __version__}
        )
    )
    if otlp_endpoint:
        _provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        _provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(_provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans and release the provider installed by setup_tracing."""
    global _tracer, _provider
    if _provider is not None:
        _provider.shutdown()
    _provider = None
    _tracer = None


def get_tracer() -> trace.Tracer:
    """Get the service tracer (the global provider's if none was set up)."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("helenabase_db")
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Run a block inside a span.

    Attribute keys are namespaced with `helenabase.`. An exception escaping
    the block is recorded on the span and marks it as failed.

    Args:
        name: Span name, usually the store operation
        attributes: Span attributes
    """
    with get_tracer().start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        for key, value in (attributes or {}).items():
            span.set_attribute(ATTRIBUTE_PREFIX + key, value)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise

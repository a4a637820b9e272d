"""
Library OpenTelemetry Setup

Production observability:
- Traces for store operations (one span per query, insert or rental)
- OTLP export when an endpoint is configured
- Logs correlated by operation name
"""
from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Iterator, Optional
import os

_tracer = None


def setup_otel(
    service_name: str = "library",
    endpoint: Optional[str] = None,
):
    """Initialize OpenTelemetry with OTLP exporter."""
    global _tracer
    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.resources import Resource

        resource = Resource.create({"service.name": service_name})
        provider = TracerProvider(resource=resource)

        otlp_endpoint = endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        if otlp_endpoint:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
            exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
            provider.add_span_processor(BatchSpanProcessor(exporter))

        trace.set_tracer_provider(provider)
        _tracer = trace.get_tracer(service_name)
        return _tracer

    except ImportError:
        # Graceful degradation if OTEL not installed
        return None


@contextmanager
def operation_span(name: str, **attributes: Any) -> Iterator[Any]:
    """Wrap a store operation in a span when tracing is active."""
    if _tracer is None:
        yield None
        return
    with _tracer.start_as_current_span(
        f"library.{name}",
        attributes={k: v for k, v in attributes.items() if v is not None},
    ) as span:
        yield span

"""
OpenTelemetry tracing setup.

Enqueueing a job and spawning a worker each get a span; HTTP requests are
traced by the FastAPI instrumentation. Spans are only exported when an OTLP
endpoint is configured.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

from jobboard import __version__
from jobboard.config import get_settings

# Probe and scrape endpoints are not traced
UNTRACED_URLS = "health,ready,live,metrics"

_tracer: Tracer | None = None


def setup_tracing() -> Tracer:
    """Install the tracer provider and return the service tracer."""
    global _tracer

    settings = get_settings()
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "service.version": __version__,
            }
        )
    )

    if settings.otel_exporter_otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(
                    endpoint=settings.otel_exporter_otlp_endpoint,
                    insecure=True,
                )
            )
        )

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(settings.otel_service_name)
    return _tracer


def get_tracer() -> Tracer:
    """Get the tracer, setting tracing up on first use."""
    global _tracer
    if _tracer is None:
        _tracer = setup_tracing()
    return _tracer


@contextmanager
def traced(name: str, **attributes: Any) -> Iterator[Span]:
    """
    Run a block inside a span.

    Attributes with a None value are skipped; callers can add more on the
    yielded span once they are known (for example the id of a new job).
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)
        yield span


def instrument_fastapi(app: Any) -> None:
    """Trace every request to the application except probes and metrics."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)

"""
OpenTelemetry tracing configuration.

Provides:
- SDK tracer provider with optional console export
- FastAPI / SQLAlchemy auto-instrumentation
- Trace context propagation across the in-process booking event queue
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import extract, inject
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from src.platform.config.core_setting import settings


class TracingConfig:
    """
    Usage:
        # Initialize once at app startup
        tracing = TracingConfig(service_name="movie-booking")
        tracing.setup()
    """

    def __init__(self, *, service_name: str, enable_console: bool | None = None) -> None:
        self.service_name = service_name
        self.enable_console = (
            settings.OTEL_CONSOLE_EXPORT if enable_console is None else enable_console
        )
        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """Install the SDK tracer provider. Call once at application startup."""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})
        self._provider = TracerProvider(resource=resource)

        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        if hasattr(engine, 'sync_engine'):  # Handle AsyncEngine by instrumenting its sync_engine
            SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        else:
            SQLAlchemyInstrumentor().instrument(engine=engine)

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()


def inject_trace_context(*, headers: dict[str, str] | None = None) -> dict[str, str]:
    """
    Capture the current trace context into a carrier dict.

    Booking events carry it so the status listener's span joins the booking trace.
    """
    headers = dict(headers or {})
    inject(headers)
    return headers


def extract_trace_context(*, headers: dict[str, str] | None = None) -> Context | None:
    """
    Rebuild a parent context from a carrier dict.

    Example::

        ctx = extract_trace_context(headers=event.trace_headers)
        with tracer.start_as_current_span('consumer.recompute_status', context=ctx):
            ...
    """
    if headers:
        return extract(headers)
    return None

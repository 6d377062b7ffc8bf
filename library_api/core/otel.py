from __future__ import annotations

import logging

from fastapi import FastAPI
from library_api.core.config import settings
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def init_otel(app: FastAPI) -> bool:
    """Instrument the app with OTLP tracing when enabled. Returns True if installed."""
    if not settings.otel_enabled:
        return False

    resource = Resource.create({"service.name": settings.api_name})
    provider = TracerProvider(resource=resource)

    # OTEL_EXPORTER_OTLP_* env vars still apply when no endpoint is configured.
    endpoint = settings.otel_otlp_endpoint
    exporter = OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)
    logger.info("OpenTelemetry tracing enabled (endpoint=%s)", endpoint or "<env>")
    return True

"""Tracing for the gateway.

``OBSERVABILITY`` selects the backend:

- ``"logfire"``: Pydantic Logfire (set ``LOGFIRE_TOKEN``)
- ``"otel"``: OpenTelemetry SDK with the OTLP HTTP exporter
- ``"off"``: nothing is instrumented (default)

Whichever backend is on, three things get spans: inbound FastAPI requests,
outbound SWAPI page fetches made through httpx, and pydantic-ai agent runs.
Both backends live in the ``observability`` extra and are imported lazily.
"""

from __future__ import annotations

from fastapi import FastAPI
from loguru import logger
from pydantic_ai import Agent

from swapi_gateway import __version__
from swapi_gateway.config import Settings

MODES = ("off", "logfire", "otel")


def observability_mode(settings: Settings) -> str:
    """Normalised backend name; unknown values fall back to ``"off"``."""
    mode = settings.observability.strip().lower()
    if mode not in MODES:
        logger.warning("Unknown observability mode '{}', disabling", settings.observability)
        return "off"
    return mode


def setup_telemetry(app: FastAPI, settings: Settings) -> str:
    """Instrument *app*, outbound httpx traffic and agent runs.

    Returns the mode that was applied.
    """
    mode = observability_mode(settings)

    if mode == "off":
        logger.info("Observability disabled (OBSERVABILITY=off)")
        return mode

    if mode == "logfire":
        _setup_logfire(app, settings)
    else:
        _setup_otel(app, settings)

    _instrument_agents()
    return mode


def _instrument_agents() -> None:
    from pydantic_ai.models.instrumented import InstrumentationSettings

    # Applies to every Agent, including ones created later in lifespan
    Agent.instrument_all(InstrumentationSettings())


def _setup_logfire(app: FastAPI, settings: Settings) -> None:
    import logfire

    logfire.configure(service_name=settings.otel_service_name)
    logfire.instrument_fastapi(app)
    logfire.instrument_httpx()

    logger.info("Logfire enabled | service={}", settings.otel_service_name)


def _setup_otel(app: FastAPI, settings: Settings) -> None:
    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "service.version": __version__,
                "upstream.base_url": settings.swapi_base_url,
            }
        )
    )
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=f"{settings.otel_exporter_otlp_endpoint}/v1/traces")
        )
    )

    if settings.otel_console_exporter:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    # SWAPI page fetches go through httpx.AsyncClient
    HTTPXClientInstrumentor().instrument()

    logger.info(
        "OpenTelemetry enabled | service={} endpoint={} upstream={}",
        settings.otel_service_name,
        settings.otel_exporter_otlp_endpoint,
        settings.swapi_base_url,
    )

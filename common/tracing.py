import logging
import os
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"

def otlp_traces_endpoint() -> str:
    """
    Resolves the OTLP/HTTP traces URL.
    A signal-specific endpoint wins; otherwise the base endpoint gets the /v1/traces path.
    """
    traces_endpoint = os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    if traces_endpoint:
        return traces_endpoint
    base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT)
    return f"{base_endpoint.rstrip('/')}/v1/traces"

def setup_telemetry(app: FastAPI) -> bool:
    """
    Sets up OpenTelemetry for the FastAPI application.
    This includes a tracer provider, an OTLP/HTTP exporter and FastAPI instrumentation.
    Must run before the application starts, since instrumentation adds middleware.
    Returns False when tracing is not configured.
    """
    service_name = os.getenv("OTEL_SERVICE_NAME")
    if not service_name:
        logger.info("OTEL_SERVICE_NAME environment variable not set. Tracing disabled.")
        return False

    resource = Resource(attributes={
        "service.name": service_name
    })

    endpoint = otlp_traces_endpoint()
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)

    logger.info(f"Telemetry setup for service: {service_name}")
    logger.info(f"OTLP traces endpoint: {endpoint}")

    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI has been instrumented.")
    return True

"""
OpenTelemetry Tracing
=====================

Distributed tracing for request flow visualization.
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from observability.logging_config import get_logger

logger = get_logger(__name__)


def setup_tracing(
    app: FastAPI,
    version: str,
    environment: str,
    otlp_endpoint: str = "disabled",
    service_name: str = "querywise-api",
) -> None:
    """
    Set up OpenTelemetry tracing for the application.

    Args:
        app: FastAPI application instance
        version: Service version reported on spans
        environment: Deployment environment name
        otlp_endpoint: OTLP collector endpoint, or ``disabled`` to skip export
        service_name: Name of the service for traces
    """
    resource = Resource.create({
        SERVICE_NAME: service_name,
        "service.version": version,
        "deployment.environment": environment,
    })
    provider = TracerProvider(resource=resource)

    if otlp_endpoint and otlp_endpoint != "disabled":
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        logger.info("tracing_export_enabled", endpoint=otlp_endpoint)

    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)


def get_tracer(name: str = __name__) -> trace.Tracer:
    """Get a tracer for creating spans."""
    return trace.get_tracer(name)

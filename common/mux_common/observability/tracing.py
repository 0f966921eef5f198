import os
import logging
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)

_TRACES_SUFFIX = "/v1/traces"


def traces_endpoint(endpoint: str) -> str:
    """Append the OTLP/HTTP traces path unless it is already there."""
    endpoint = endpoint.rstrip("/")
    if endpoint.endswith(_TRACES_SUFFIX):
        return endpoint
    return f"{endpoint}{_TRACES_SUFFIX}"


def init_tracing(service_name: str, endpoint: str | None = None) -> None:
    """
    Initialize OpenTelemetry tracing with the OTLP HTTP exporter.

    Args:
        service_name: Name reported on every span (e.g. "mux-analytics-agent").
        endpoint: OTLP HTTP collector URL. Falls back to
                  OTEL_EXPORTER_OTLP_ENDPOINT, then http://localhost:4318.
    """
    if endpoint is None:
        endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")

    url = traces_endpoint(endpoint)
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=url)))
    trace.set_tracer_provider(provider)

    logger.info("Tracing initialized for %s (exporting to %s)", service_name, url)


def shutdown_tracing() -> None:
    """Flush and shutdown the global tracer provider."""
    try:
        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
            logger.info("Tracer shutdown complete")
    except Exception as e:
        logger.warning("Tracer shutdown warning: %s", e)

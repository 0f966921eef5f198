"""
Shared observability for the Mux analytics services.

JSON logs carrying trace ids, OTLP tracing, Prometheus metric factories,
outbound ``traceparent`` injection and an HTTP request-counting
middleware. Services call ``init_observability`` once at import time and
then declare their own metrics with the ``create_*`` factories::

    init_observability("mux-analytics-agent", "0.1.0")
    BACKEND_REQUESTS = create_counter("backend_requests_total", "...", ["transport"])

Test helpers live in ``mux_common.observability.testing`` and are not
re-exported here.
"""

import os as _os

from .logging import JsonTraceFormatter, get_logger, level_from_env, setup_logging
from .metrics import (
    create_counter,
    create_gauge,
    create_histogram,
    create_service_info,
    metrics_response,
    observe_duration,
)
from .middleware import MetricsMiddleware, route_template
from .propagation import inject_trace_context
from .tracing import init_tracing, shutdown_tracing


def init_observability(
    service_name: str,
    version: str,
    *,
    log_level: int | None = None,
    environment: str | None = None,
) -> None:
    """
    Configure logging, tracing and the service-info metric for a process.

    Tracing is only enabled when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set. A
    tracing setup failure is logged; the service keeps running untraced.

    Args:
        service_name: Name on spans and, with ``-`` as ``_``, the info metric.
        version: Reported in the info metric.
        log_level: Root log level; ``$LOG_LEVEL`` or INFO when omitted.
        environment: Reported in the info metric; ``$ENVIRONMENT`` or
            ``development`` when omitted.
    """
    setup_logging(log_level)
    logger = get_logger(service_name)

    if _os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        try:
            init_tracing(service_name)
        except Exception as exc:
            logger.warning("Tracing init failed, continuing without traces: %s", exc)
    else:
        logger.info("Tracing disabled (OTEL_EXPORTER_OTLP_ENDPOINT not set)")

    create_service_info(service_name.replace("-", "_"), version, environment)
    logger.info("Observability ready for %s v%s", service_name, version)


__all__ = [
    "init_observability",
    "JsonTraceFormatter",
    "get_logger",
    "level_from_env",
    "setup_logging",
    "create_counter",
    "create_gauge",
    "create_histogram",
    "create_service_info",
    "metrics_response",
    "observe_duration",
    "MetricsMiddleware",
    "route_template",
    "inject_trace_context",
    "init_tracing",
    "shutdown_tracing",
]

"""
Service-specific telemetry for the analytics agent.

Domain metrics and FastAPI instrumentation that sit on top of the
shared ``mux_common.observability`` module.
"""

import logging

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from mux_common.observability import (
    create_counter,
    create_gauge,
    create_histogram,
    MetricsMiddleware,
)

logger = logging.getLogger("telemetry")

# ── Metrics (Prometheus) ──────────────────────────────────────────

HTTP_REQUESTS = create_counter(
    "http_requests_total",
    "Total HTTP requests by method and path",
    ["method", "path", "status"],
)

BACKEND_REQUESTS = create_counter(
    "backend_requests_total",
    "Analytics backend calls by transport, endpoint and outcome",
    ["transport", "endpoint", "outcome"],
)

BACKEND_DURATION = create_histogram(
    "backend_request_duration_seconds",
    "Time spent in a single analytics backend call",
    labelnames=["transport"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

TRANSPORT_FALLBACKS = create_counter(
    "transport_fallbacks_total",
    "Times a transport failed and the next one in the chain was tried",
    ["transport"],
)

# ── Business Metrics ─────────────────────────────────────────────

HEALTH_SCORE = create_gauge(
    "streaming_health_score",
    "Most recent streaming health score (0-100)",
)

TOOL_INVOCATIONS = create_counter(
    "tool_invocations_total",
    "Agent tool invocations by tool and success",
    ["tool", "success"],
)


# ── Initialization ───────────────────────────────────────────────

def init(app):
    """Wire service-specific telemetry into the FastAPI app.

    * Adds the HTTP-metrics middleware.
    * Wires backend and tool metrics into their modules.
    * Instruments FastAPI with OpenTelemetry auto-instrumentation.
    """
    app.add_middleware(MetricsMiddleware, counter=HTTP_REQUESTS)

    from app.backends import chain
    chain.backend_requests_counter = BACKEND_REQUESTS
    chain.backend_duration_histogram = BACKEND_DURATION
    chain.transport_fallbacks_counter = TRANSPORT_FALLBACKS

    from app import tools
    tools.tool_invocations_counter = TOOL_INVOCATIONS

    # FastAPI auto-instrumentation (creates spans for every route)
    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumentation enabled")
    except Exception as e:
        logger.warning("FastAPI instrumentation failed: %s", e)

    logger.info("Service telemetry initialised")

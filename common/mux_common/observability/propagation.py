"""
W3C TraceContext propagation for outbound HTTP calls.

The REST transport injects ``traceparent`` into the headers it sends to
the Mux API so backend latency shows up under the originating request
span.
"""

from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_propagator = TraceContextTextMapPropagator()


def inject_trace_context(headers: dict) -> dict:
    """Inject the current span's ``traceparent`` into *headers* in place."""
    _propagator.inject(headers)
    return headers

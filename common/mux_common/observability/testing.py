"""
Test utilities for the observability stack.

In-memory span capture for asserting on backend-call spans, and a
registry reset so each test starts with fresh Prometheus collectors.
"""

from prometheus_client import REGISTRY
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider, ReadableSpan
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.resources import Resource


def setup_test_tracing(service_name: str = "test-service") -> InMemorySpanExporter:
    """
    Install a TracerProvider that records into an InMemorySpanExporter.

    Replaces any provider already set, so it can be called from every
    test's setup.
    """
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    # Bypass the set-once guard on the global provider
    trace._TRACER_PROVIDER = None
    trace._TRACER_PROVIDER_SET_ONCE._done = False
    trace.set_tracer_provider(provider)
    return exporter


def get_spans_by_name(exporter: InMemorySpanExporter, name: str) -> list[ReadableSpan]:
    """Finished spans with the given operation name."""
    return [s for s in exporter.get_finished_spans() if s.name == name]


def reset_metrics() -> None:
    """
    Unregister every user-created collector from the default registry.

    Platform collectors (``gc``, ``process``, ``platform``) carry no
    ``_name`` attribute and are left in place.
    """
    seen = set()
    for collector in list(REGISTRY._names_to_collectors.values()):
        if not hasattr(collector, "_name") or id(collector) in seen:
            continue
        seen.add(id(collector))
        try:
            REGISTRY.unregister(collector)
        except KeyError:
            pass

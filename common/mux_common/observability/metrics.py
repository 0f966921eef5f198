"""
Prometheus metric factories with idempotent registration.

``create_counter`` / ``create_histogram`` / ``create_gauge`` /
``create_info`` return the already-registered collector when a metric of
the same name exists, so modules can declare their metrics at import time
without tripping over reloads in tests. ``observe_duration`` times a block
into a histogram, and ``metrics_response`` renders the exposition format.
"""

import os
import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, Info, Gauge, REGISTRY, generate_latest, CONTENT_TYPE_LATEST


def _find_registered(name: str):
    for collector in REGISTRY._names_to_collectors.values():
        if getattr(collector, "_name", None) == name:
            return collector
        if getattr(collector, "_original_name", None) == name:
            return collector
    return None


def _get_or_create(metric_cls, name, documentation, **kwargs):
    """Create a metric or return the existing one if already registered."""
    try:
        return metric_cls(name, documentation, **kwargs)
    except ValueError:
        existing = _find_registered(name)
        if existing is None:
            raise
        return existing


def create_counter(name: str, documentation: str, labelnames: list[str] = None) -> Counter:
    """Create (or retrieve) a Prometheus Counter."""
    return _get_or_create(Counter, name, documentation, labelnames=labelnames or [])


def create_histogram(name: str, documentation: str, buckets: list[float] = None, labelnames: list[str] = None) -> Histogram:
    """Create (or retrieve) a Prometheus Histogram."""
    kwargs = {"labelnames": labelnames or []}
    if buckets:
        kwargs["buckets"] = buckets
    return _get_or_create(Histogram, name, documentation, **kwargs)


def create_gauge(name: str, documentation: str, labelnames: list[str] = None) -> Gauge:
    """Create (or retrieve) a Prometheus Gauge."""
    return _get_or_create(Gauge, name, documentation, labelnames=labelnames or [])


def create_info(name: str, documentation: str) -> Info:
    """Create (or retrieve) a Prometheus Info metric."""
    return _get_or_create(Info, name, documentation)


def create_service_info(service_name: str, version: str, environment: str | None = None) -> Info:
    """
    Publish service metadata as an Info metric.

    Args:
        service_name: Metric name (e.g. ``"mux_analytics_agent"``).
        version: Service version string.
        environment: Deployment environment; falls back to ``$ENVIRONMENT``,
            then ``"development"``.
    """
    info = create_info(service_name, "Service metadata")
    info.info({
        "version": version,
        "environment": environment or os.environ.get("ENVIRONMENT", "development"),
    })
    return info


@contextmanager
def observe_duration(histogram: Histogram | None, **labels):
    """Record the wall time of the ``with`` block into *histogram*.

    A ``None`` histogram makes this a no-op, for code paths where metrics
    have not been wired.
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        if histogram is not None:
            target = histogram.labels(**labels) if labels else histogram
            target.observe(time.perf_counter() - started)


def metrics_response():
    """
    Prometheus exposition bytes plus the matching content type.

    Returns:
        tuple[bytes, str]: ``(body, content_type)``.
    """
    return generate_latest(), CONTENT_TYPE_LATEST

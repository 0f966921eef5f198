"""
Structured JSON logging with OpenTelemetry trace context injection.

``setup_logging()`` configures the root logger once: JSON lines on stderr,
with the active trace/span ids added to every record so log lines can be
joined to the backend-call spans.

Usage::

    from mux_common.observability.logging import setup_logging, get_logger

    setup_logging()                            # once at process startup
    logger = get_logger("mux-analytics")       # named logger
    logger.info("fetched metrics")             # {"timestamp": ..., "level": "INFO", ...}
"""

import logging
import os

from opentelemetry.instrumentation.logging import LoggingInstrumentor
from pythonjsonlogger.json import JsonFormatter


_FORMAT_STRING = "%(timestamp)s %(level)s %(name)s %(message)s"
_setup_done = False


class JsonTraceFormatter(JsonFormatter):
    """JSON formatter that adds standard fields to every log record."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()
        trace_id = getattr(record, "otelTraceID", None)
        if trace_id and trace_id != "0":
            log_record["trace_id"] = trace_id
            log_record["span_id"] = getattr(record, "otelSpanID", "")


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve ``$LOG_LEVEL`` (name or number) to a logging level."""
    raw = os.environ.get("LOG_LEVEL")
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def setup_logging(level: int | None = None) -> None:
    """
    Configure the root logger with structured JSON output and trace context.

    Safe to call multiple times; only the first call has an effect.

    Args:
        level: Root log level. Defaults to ``$LOG_LEVEL`` or ``INFO``.
    """
    global _setup_done
    if _setup_done:
        return
    _setup_done = True

    # Instrument stdlib logging so OTel injects trace/span IDs
    LoggingInstrumentor().instrument(set_logging_format=False)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonTraceFormatter(_FORMAT_STRING))

    root = logging.getLogger()
    root.setLevel(level if level is not None else level_from_env())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger (thin wrapper for discoverability)."""
    return logging.getLogger(name)

"""
Timeframe resolution for Mux Data queries.

Turns whatever the agent hands us (an epoch pair, a pair of numeric
strings, or a relative phrase such as ``"last 7 days"``) into a
validated ``TimeRange`` the Data API accepts:

  1. A missing bound is derived from the other one (± one day).
  2. An inverted range is rebuilt as the day ending at ``end``.
  3. Ranges shorter than an hour are widened backwards to one hour.
  4. Nothing may lie in the future: ``end`` is clamped to ``now``.

Unparseable input never raises; it falls back to the trailing 24 hours.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

logger = logging.getLogger("timeframe")

HOUR_SECONDS = 60 * 60
DAY_SECONDS = 24 * HOUR_SECONDS
MIN_SPAN_SECONDS = HOUR_SECONDS
DEFAULT_SPAN_SECONDS = DAY_SECONDS

UNIT_SECONDS = {
    "hour": HOUR_SECONDS,
    "day": DAY_SECONDS,
    "week": 7 * DAY_SECONDS,
    "month": 30 * DAY_SECONDS,
}

_RELATIVE_RE = re.compile(
    r"^\s*last\s+(\d+)\s+(hour|day|week|month)s?\s*$",
    re.IGNORECASE,
)

RawBound = Union[int, float, str, None]


@dataclass(frozen=True)
class TimeRange:
    """Inclusive epoch-second window sent to the analytics API."""

    start: int
    end: int

    @property
    def span(self) -> int:
        return self.end - self.start

    def as_query(self) -> list[str]:
        """Timeframe pair in the string form the Data API expects."""
        return [str(self.start), str(self.end)]

    def to_iso(self) -> dict[str, str]:
        return {
            "start": datetime.fromtimestamp(self.start, timezone.utc).isoformat(),
            "end": datetime.fromtimestamp(self.end, timezone.utc).isoformat(),
        }


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else int(now)


def coerce_bound(value: RawBound) -> Optional[int]:
    """Parse a single bound; anything non-numeric counts as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def default_range(now: Optional[int] = None) -> TimeRange:
    """The trailing 24 hours ending at *now*."""
    end = _now(now)
    return TimeRange(start=end - DEFAULT_SPAN_SECONDS, end=end)


def resolve(
    raw_start: RawBound = None,
    raw_end: RawBound = None,
    now: Optional[int] = None,
) -> TimeRange:
    """Validate an absolute ``[start, end]`` pair.

    Args:
        raw_start: Epoch seconds (or numeric string) for the window start.
        raw_end: Epoch seconds (or numeric string) for the window end.
        now: Evaluation time; defaults to the wall clock.

    Returns:
        A ``TimeRange`` with ``start < end``, a span of at least one hour,
        and no bound later than *now*.
    """
    current = _now(now)
    start = coerce_bound(raw_start)
    end = coerce_bound(raw_end)

    if start is None and end is None:
        return default_range(current)

    if end is None:
        end = start + DAY_SECONDS
    elif start is None:
        start = end - DAY_SECONDS

    if start >= end:
        start = end - DAY_SECONDS

    if end - start < MIN_SPAN_SECONDS:
        start = end - MIN_SPAN_SECONDS

    if end > current:
        end = current
    start = min(start, end - MIN_SPAN_SECONDS)

    return TimeRange(start=start, end=end)


def parse_relative(phrase: str) -> Optional[int]:
    """Return the span in seconds for ``"last N <unit>"``, or None."""
    match = _RELATIVE_RE.match(phrase or "")
    if not match:
        return None
    count = int(match.group(1))
    if count <= 0:
        return None
    return count * UNIT_SECONDS[match.group(2).lower()]


def resolve_relative(phrase: str, now: Optional[int] = None) -> TimeRange:
    """Resolve a trailing-window phrase such as ``"last 3 months"``."""
    end = _now(now)
    span = parse_relative(phrase)
    if span is None:
        logger.info("Unrecognised timeframe %r, using last 24 hours", phrase)
        return default_range(end)
    return TimeRange(start=end - span, end=end)


def resolve_timeframe(value, now: Optional[int] = None) -> TimeRange:
    """Resolve an agent-supplied ``timeframe`` argument of any accepted shape."""
    if value is None:
        return default_range(now)
    if isinstance(value, str):
        return resolve_relative(value, now)
    if isinstance(value, (list, tuple)) and len(value) >= 2:
        return resolve(value[0], value[1], now)
    logger.info("Ignoring malformed timeframe %r, using last 24 hours", value)
    return default_range(now)

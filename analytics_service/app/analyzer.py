"""
Rule-based streaming health analyzer.

Scores a Mux Data metrics record against fixed quality thresholds. The
score starts at 100 and each crossed threshold subtracts a fixed penalty;
for two-tier checks only the higher tier applies. Issues and
recommendations are emitted in check order so the output is stable:

  1. error rate           > 5% (-20)       else > 2% (-10)
  2. rebuffer rate        > 10% (-25)      else > 5% (-15)
  3. average startup      > 5000ms (-15)   else > 3000ms (-10)
  4. startup failures     > 2% (-20)
  5. playback failure     > 50 (-30)       else > 20 (-15)

Fields missing from the record are skipped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

logger = logging.getLogger("analyzer")

MAX_HEALTH_SCORE = 100

ERROR_RATE_HIGH = 5.0
ERROR_RATE_MODERATE = 2.0
ERROR_RATE_EXCELLENT = 1.0

REBUFFER_RATE_HIGH = 10.0
REBUFFER_RATE_MODERATE = 5.0
REBUFFER_RATE_EXCELLENT = 2.0

STARTUP_MS_SLOW = 5000.0
STARTUP_MS_MODERATE = 3000.0
STARTUP_MS_FAST = 2000.0

STARTUP_FAILURE_HIGH = 2.0

PLAYBACK_FAILURE_HIGH = 50.0
PLAYBACK_FAILURE_ELEVATED = 20.0


# ── Data classes ─────────────────────────────────────────────────


@dataclass
class HealthAssessment:
    """Outcome of a single metrics evaluation."""

    health_score: int
    summary: str
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    positive_notes: list[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    def to_dict(self) -> dict:
        return {
            "healthScore": self.health_score,
            "summary": self.summary,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


# ── Analyzer ─────────────────────────────────────────────────────


def metric_value(metrics: Mapping[str, Any], key: str) -> Optional[float]:
    """*key* as a finite float, or None when it is missing or not numeric."""
    value = metrics.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric %s=%r", key, value)
        return None
    if not math.isfinite(number):
        logger.debug("Ignoring non-finite %s=%r", key, value)
        return None
    return number


def _format_score(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def analyze_metrics(metrics: Optional[Mapping[str, Any]]) -> HealthAssessment:
    """Evaluate a metrics record and return a ``HealthAssessment``.

    Args:
        metrics: Mapping with any of ``total_error_percentage``,
            ``total_rebuffer_percentage``, ``average_startup_time_ms``,
            ``average_video_startup_failure_percentage`` and
            ``playback_failure_score``.

    Returns:
        HealthAssessment with a score clamped to ``[0, 100]``.
    """
    metrics = metrics or {}
    issues: list[str] = []
    recommendations: list[str] = []
    score = MAX_HEALTH_SCORE

    error_rate = metric_value(metrics, "total_error_percentage")
    rebuffer_rate = metric_value(metrics, "total_rebuffer_percentage")
    startup_ms = metric_value(metrics, "average_startup_time_ms")
    startup_failures = metric_value(metrics, "average_video_startup_failure_percentage")
    playback_failure = metric_value(metrics, "playback_failure_score")

    if error_rate is not None:
        if error_rate > ERROR_RATE_HIGH:
            issues.append(
                f"High error rate: {error_rate:.2f}% of views encountered errors"
            )
            recommendations.append(
                "Investigate error logs and ensure proper encoding settings. "
                "Consider implementing better error handling in your player."
            )
            score -= 20
        elif error_rate > ERROR_RATE_MODERATE:
            issues.append(f"Moderate error rate: {error_rate:.2f}% of views had errors")
            recommendations.append(
                "Monitor error patterns and consider reviewing encoding profiles."
            )
            score -= 10

    if rebuffer_rate is not None:
        if rebuffer_rate > REBUFFER_RATE_HIGH:
            issues.append(
                f"High rebuffering: {rebuffer_rate:.2f}% of viewing time spent rebuffering"
            )
            recommendations.append(
                "Optimize CDN delivery, consider lower bitrate ladder for poor "
                "connections, or implement adaptive bitrate more aggressively."
            )
            score -= 25
        elif rebuffer_rate > REBUFFER_RATE_MODERATE:
            issues.append(f"Moderate rebuffering: {rebuffer_rate:.2f}% rebuffering detected")
            recommendations.append(
                "Review CDN performance and consider expanding edge locations."
            )
            score -= 15

    if startup_ms is not None:
        if startup_ms > STARTUP_MS_SLOW:
            issues.append(
                f"Slow startup: Average {startup_ms / 1000:.2f}s to start playback"
            )
            recommendations.append(
                "Enable player preloading, optimize initial segment size, and "
                "consider using lower resolution for initial frame."
            )
            score -= 15
        elif startup_ms > STARTUP_MS_MODERATE:
            issues.append(f"Moderate startup time: {startup_ms / 1000:.2f}s average")
            recommendations.append(
                "Consider optimizing player initialization and reducing initial segment size."
            )
            score -= 10

    if startup_failures is not None and startup_failures > STARTUP_FAILURE_HIGH:
        issues.append(f"Video startup failures: {startup_failures:.2f}%")
        recommendations.append(
            "Check video encoding compatibility and ensure proper fallback mechanisms."
        )
        score -= 20

    if playback_failure is not None:
        if playback_failure > PLAYBACK_FAILURE_HIGH:
            issues.append(
                f"High playback failure score: {_format_score(playback_failure)}"
            )
            recommendations.append(
                "Critical: Investigate player configuration, DRM settings, and "
                "network delivery issues immediately."
            )
            score -= 30
        elif playback_failure > PLAYBACK_FAILURE_ELEVATED:
            issues.append(
                f"Elevated playback failure score: {_format_score(playback_failure)}"
            )
            recommendations.append(
                "Review player logs and monitor for systematic failures."
            )
            score -= 15

    # Positive notes never affect the score
    positive_notes: list[str] = []
    if error_rate is not None and error_rate < ERROR_RATE_EXCELLENT:
        positive_notes.append("Excellent error rate (<1%)")
    if rebuffer_rate is not None and rebuffer_rate < REBUFFER_RATE_EXCELLENT:
        positive_notes.append("Excellent playback smoothness")
    if startup_ms is not None and startup_ms < STARTUP_MS_FAST:
        positive_notes.append("Fast startup time")

    score = max(0, score)

    if not issues:
        summary = "Streaming performance is excellent."
        if positive_notes:
            summary = f"Streaming performance is excellent. {', '.join(positive_notes)}."
    else:
        summary = (
            f"Found {len(issues)} area(s) requiring attention. "
            f"Health score: {score}/100"
        )

    return HealthAssessment(
        health_score=score,
        summary=summary,
        issues=issues,
        recommendations=recommendations,
        positive_notes=positive_notes,
    )

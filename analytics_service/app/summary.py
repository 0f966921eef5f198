"""Plain-text analytics report, bounded to 1000 words."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from app.analyzer import HealthAssessment, metric_value
from app.timeframe import TimeRange

MAX_WORDS = 1000
TRUNCATED_WORDS = 900
TRUNCATION_MARKER = "... (Summary truncated to stay under 1000 words)"


def _format_instant(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, timezone.utc).strftime("%b %d, %Y %H:%M UTC")


def _closing_remark(health_score: int) -> str:
    if health_score >= 90:
        return (
            "Your streaming infrastructure is performing exceptionally well. "
            "Continue monitoring for any changes in traffic patterns or new device types."
        )
    if health_score >= 75:
        return (
            "Overall performance is good, with some areas for optimization. "
            "Address the recommendations above to improve user experience."
        )
    if health_score >= 50:
        return (
            "Performance needs improvement. Focus on the critical issues first, "
            "particularly those affecting playback reliability."
        )
    return (
        "Critical attention required. Multiple performance issues detected that "
        "significantly impact user experience. Prioritize immediate remediation."
    )


def _metric_lines(metrics: Mapping[str, Any]) -> list[str]:
    # Unparseable fields are left out, matching what the analyzer ignores.
    lines = []
    views = metric_value(metrics, "total_views")
    if views is not None:
        lines.append(f"- Total Views: {int(views):,}")
    playing = metric_value(metrics, "total_playing_time_seconds")
    if playing is not None:
        seconds = int(playing)
        lines.append(f"- Total Watch Time: {seconds // 3600}h {(seconds % 3600) // 60}m")
    startup_ms = metric_value(metrics, "average_startup_time_ms")
    if startup_ms is not None:
        lines.append(f"- Average Startup Time: {startup_ms / 1000:.2f} seconds")
    rebuffer = metric_value(metrics, "total_rebuffer_percentage")
    if rebuffer is not None:
        lines.append(f"- Rebuffering Rate: {rebuffer:.2f}%")
    errors = metric_value(metrics, "total_error_percentage")
    if errors is not None:
        lines.append(f"- Error Rate: {errors:.2f}%")
    startup_failures = metric_value(metrics, "average_video_startup_failure_percentage")
    if startup_failures is not None:
        lines.append(f"- Video Startup Failures: {startup_failures:.2f}%")
    if metric_value(metrics, "playback_failure_score") is not None:
        lines.append(f"- Playback Failure Score: {metrics['playback_failure_score']}")
    return lines


def enforce_word_limit(text: str) -> str:
    """Cut *text* to 900 words plus a marker when it exceeds 1000 words."""
    words = text.split()
    if len(words) <= MAX_WORDS:
        return text
    return " ".join(words[:TRUNCATED_WORDS]) + TRUNCATION_MARKER


def format_analytics_summary(
    metrics: Mapping[str, Any],
    analysis: HealthAssessment,
    time_range: TimeRange,
) -> str:
    """Render metrics and their assessment as a concise text report."""
    metrics = metrics or {}
    parts = [
        "Mux Video Streaming Analytics Report",
        f"Time Range: {_format_instant(time_range.start)} to {_format_instant(time_range.end)}",
        "",
        f"Overall Health Score: {analysis.health_score} out of 100",
        analysis.summary,
        "",
        "Key Performance Indicators:",
        *_metric_lines(metrics),
        "",
    ]

    if analysis.issues:
        parts.append("Issues Identified:")
        parts.extend(f"{i}. {issue}" for i, issue in enumerate(analysis.issues, 1))
        parts.append("")

    if analysis.recommendations:
        parts.append("Engineering Recommendations:")
        parts.extend(
            f"{i}. {rec}" for i, rec in enumerate(analysis.recommendations, 1)
        )
        parts.append("")

    parts.append(_closing_remark(analysis.health_score))

    return enforce_word_limit("\n".join(parts))

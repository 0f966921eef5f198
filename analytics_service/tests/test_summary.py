"""Tests for the word-bounded analytics summary."""

from app.analyzer import HealthAssessment, analyze_metrics
from app.summary import (
    MAX_WORDS,
    TRUNCATED_WORDS,
    TRUNCATION_MARKER,
    enforce_word_limit,
    format_analytics_summary,
)
from app.timeframe import TimeRange

RANGE = TimeRange(start=1_735_689_600, end=1_735_776_000)  # Jan 01 → Jan 02 2025


def _words(text: str) -> int:
    return len(text.split())


class TestFormat:
    def test_header_and_range(self):
        text = format_analytics_summary({}, analyze_metrics({}), RANGE)
        lines = text.split("\n")
        assert lines[0] == "Mux Video Streaming Analytics Report"
        assert lines[1] == "Time Range: Jan 01, 2025 00:00 UTC to Jan 02, 2025 00:00 UTC"

    def test_only_present_metrics_listed(self):
        metrics = {"total_views": 12345, "total_error_percentage": 0.5}
        text = format_analytics_summary(metrics, analyze_metrics(metrics), RANGE)
        assert "- Total Views: 12,345" in text
        assert "- Error Rate: 0.50%" in text
        assert "Rebuffering Rate" not in text
        assert "Average Startup Time" not in text

    def test_watch_time_in_hours_and_minutes(self):
        metrics = {"total_playing_time_seconds": 7_380}
        text = format_analytics_summary(metrics, analyze_metrics(metrics), RANGE)
        assert "- Total Watch Time: 2h 3m" in text

    def test_unparseable_metrics_skipped(self):
        metrics = {"total_views": "n/a", "total_error_percentage": 6, "total_playing_time_seconds": "inf"}
        text = format_analytics_summary(metrics, analyze_metrics(metrics), RANGE)
        assert "Total Views" not in text
        assert "Total Watch Time" not in text
        assert "- Error Rate: 6.00%" in text

    def test_numbered_issues_and_recommendations(self):
        metrics = {"total_error_percentage": 7, "total_rebuffer_percentage": 12}
        analysis = analyze_metrics(metrics)
        text = format_analytics_summary(metrics, analysis, RANGE)
        assert "Issues Identified:\n1. High error rate" in text
        assert "\n2. High rebuffering" in text
        assert "Engineering Recommendations:\n1. Investigate error logs" in text

    def test_no_issue_sections_when_healthy(self):
        text = format_analytics_summary({}, analyze_metrics({}), RANGE)
        assert "Issues Identified" not in text
        assert "Engineering Recommendations" not in text

    def test_closing_remark_bands(self):
        def closing(score):
            analysis = HealthAssessment(health_score=score, summary="s")
            return format_analytics_summary({}, analysis, RANGE).split("\n")[-1]

        assert closing(95).startswith("Your streaming infrastructure is performing exceptionally well")
        assert closing(90).startswith("Your streaming infrastructure")
        assert closing(80).startswith("Overall performance is good")
        assert closing(60).startswith("Performance needs improvement")
        assert closing(10).startswith("Critical attention required")


class TestWordLimit:
    def test_short_text_untouched(self):
        assert enforce_word_limit("a b c") == "a b c"

    def test_exactly_limit_untouched(self):
        text = " ".join(["w"] * MAX_WORDS)
        assert enforce_word_limit(text) == text

    def test_long_text_truncated(self):
        text = " ".join(["w"] * (MAX_WORDS + 1))
        result = enforce_word_limit(text)
        assert result.endswith(TRUNCATION_MARKER)
        assert _words(result) <= MAX_WORDS
        assert result.startswith(" ".join(["w"] * TRUNCATED_WORDS))

    def test_many_issues_trigger_marker(self):
        analysis = HealthAssessment(
            health_score=0,
            summary="Found lots of problems",
            issues=[f"Issue number {i} with a fairly long description attached" for i in range(120)],
            recommendations=[f"Recommendation {i} to fix the matching issue quickly" for i in range(120)],
        )
        text = format_analytics_summary({"total_views": 1}, analysis, RANGE)
        assert text.endswith(TRUNCATION_MARKER)
        assert _words(text) <= MAX_WORDS

    def test_regular_report_under_limit(self):
        metrics = {
            "total_error_percentage": 7,
            "total_rebuffer_percentage": 12,
            "average_startup_time_ms": 6000,
            "playback_failure_score": 60,
            "total_views": 5000,
        }
        text = format_analytics_summary(metrics, analyze_metrics(metrics), RANGE)
        assert TRUNCATION_MARKER not in text
        assert _words(text) <= MAX_WORDS

"""Tests for timeframe resolution."""

import pytest

from app.timeframe import (
    DAY_SECONDS,
    HOUR_SECONDS,
    TimeRange,
    coerce_bound,
    default_range,
    parse_relative,
    resolve,
    resolve_relative,
    resolve_timeframe,
)

NOW = 1_750_000_000


# ── Bound coercion ────────────────────────────────────────────────

class TestCoerceBound:
    @pytest.mark.parametrize("value, expected", [
        (1_700_000_000, 1_700_000_000),
        ("1700000000", 1_700_000_000),
        (" 1700000000 ", 1_700_000_000),
        (1_700_000_000.9, 1_700_000_000),
        ("1700000000.5", 1_700_000_000),
        (0, 0),
    ])
    def test_numeric_values(self, value, expected):
        assert coerce_bound(value) == expected

    @pytest.mark.parametrize("value", [None, "yesterday", "", True, False, [1], float("inf")])
    def test_non_numeric_is_absent(self, value):
        assert coerce_bound(value) is None


# ── Absolute ranges ───────────────────────────────────────────────

class TestResolve:
    def test_valid_pair_unchanged(self):
        start, end = NOW - 3 * DAY_SECONDS, NOW - DAY_SECONDS
        assert resolve(start, end, now=NOW) == TimeRange(start, end)

    def test_exactly_one_hour_unchanged(self):
        start, end = NOW - 2 * HOUR_SECONDS, NOW - HOUR_SECONDS
        assert resolve(start, end, now=NOW) == TimeRange(start, end)

    def test_numeric_strings_accepted(self):
        start, end = NOW - 7200, NOW - 100
        assert resolve(str(start), str(end), now=NOW) == TimeRange(start, end)

    def test_no_input_gives_default_window(self):
        result = resolve(now=NOW)
        assert result == TimeRange(NOW - DAY_SECONDS, NOW)

    def test_unparseable_input_gives_default_window(self):
        assert resolve("foo", "bar", now=NOW) == default_range(NOW)

    def test_missing_end_derived_from_start(self):
        start = NOW - 5 * DAY_SECONDS
        assert resolve(start, None, now=NOW) == TimeRange(start, start + DAY_SECONDS)

    def test_missing_start_derived_from_end(self):
        end = NOW - 5 * DAY_SECONDS
        assert resolve(None, end, now=NOW) == TimeRange(end - DAY_SECONDS, end)

    def test_garbage_start_treated_as_missing(self):
        end = NOW - 5 * DAY_SECONDS
        assert resolve("soon", end, now=NOW) == TimeRange(end - DAY_SECONDS, end)

    @pytest.mark.parametrize("offset", [0, 1, 3600, 10 * DAY_SECONDS])
    def test_inverted_or_equal_pair_rebuilt_from_end(self, offset):
        end = NOW - 2 * DAY_SECONDS
        result = resolve(end + offset, end, now=NOW)
        assert result == TimeRange(end - DAY_SECONDS, end)

    def test_short_span_extended_to_one_hour(self):
        end = NOW - DAY_SECONDS
        result = resolve(end - 60, end, now=NOW)
        assert result == TimeRange(end - HOUR_SECONDS, end)

    def test_future_end_clamped_to_now(self):
        result = resolve(NOW - DAY_SECONDS, NOW + DAY_SECONDS, now=NOW)
        assert result == TimeRange(NOW - DAY_SECONDS, NOW)

    def test_entirely_future_window_pulled_back(self):
        result = resolve(NOW + DAY_SECONDS, NOW + 2 * DAY_SECONDS, now=NOW)
        assert result.end == NOW
        assert result.span >= HOUR_SECONDS

    def test_old_dates_are_not_clamped(self):
        # 2015-01-01 → 2015-01-02
        result = resolve(1_420_070_400, 1_420_156_800, now=NOW)
        assert result == TimeRange(1_420_070_400, 1_420_156_800)

    def test_zero_is_a_value_not_absent(self):
        result = resolve(0, 7200, now=NOW)
        assert result == TimeRange(0, 7200)

    @pytest.mark.parametrize("start, end", [
        (NOW, NOW - DAY_SECONDS),
        (None, NOW + 99),
        (NOW - 10, None),
        ("x", NOW),
        (NOW - 30, NOW - 20),
    ])
    def test_invariants_always_hold(self, start, end):
        result = resolve(start, end, now=NOW)
        assert result.start < result.end
        assert result.span >= HOUR_SECONDS
        assert result.end <= NOW

    def test_deterministic_for_fixed_now(self):
        assert resolve("1", "2", now=NOW) == resolve("1", "2", now=NOW)


# ── Relative phrases ──────────────────────────────────────────────

class TestRelative:
    def test_last_7_days(self):
        result = resolve_relative("last 7 days", now=NOW)
        assert result == TimeRange(NOW - 7 * DAY_SECONDS, NOW)

    def test_last_30_days(self):
        assert resolve_relative("last 30 days", now=NOW).span == 30 * DAY_SECONDS

    def test_one_month_equals_thirty_days(self):
        assert resolve_relative("last 1 month", now=NOW) == resolve_relative("last 30 days", now=NOW)

    @pytest.mark.parametrize("phrase, span", [
        ("last 1 hour", HOUR_SECONDS),
        ("last 6 hours", 6 * HOUR_SECONDS),
        ("last 1 day", DAY_SECONDS),
        ("last 2 weeks", 14 * DAY_SECONDS),
        ("last 3 months", 90 * DAY_SECONDS),
        ("  LAST 2 Days  ", 2 * DAY_SECONDS),
    ])
    def test_units(self, phrase, span):
        assert parse_relative(phrase) == span

    @pytest.mark.parametrize("phrase", [
        "yesterday", "last week", "last 0 days", "past 7 days", "last 7 years", "", "last -1 days",
    ])
    def test_unrecognised_phrase_falls_back_to_default(self, phrase):
        assert resolve_relative(phrase, now=NOW) == default_range(NOW)


# ── Dispatch ──────────────────────────────────────────────────────

class TestResolveTimeframe:
    def test_none(self):
        assert resolve_timeframe(None, now=NOW) == default_range(NOW)

    def test_string(self):
        assert resolve_timeframe("last 2 days", now=NOW).span == 2 * DAY_SECONDS

    def test_list_pair(self):
        start, end = NOW - 9000, NOW - 1000
        assert resolve_timeframe([str(start), end], now=NOW) == TimeRange(start, end)

    def test_short_list_falls_back(self):
        assert resolve_timeframe([NOW], now=NOW) == default_range(NOW)


class TestTimeRange:
    def test_as_query_is_string_pair(self):
        assert TimeRange(100, 4000).as_query() == ["100", "4000"]

    def test_to_iso(self):
        iso = TimeRange(0, 3600).to_iso()
        assert iso == {"start": "1970-01-01T00:00:00+00:00", "end": "1970-01-01T01:00:00+00:00"}

"""Tests for the time-bucket and app-usage pattern miners."""

import math

import pytest

from activity_insights.analysis.app_usage import (
    aggregate_app_usage,
    analyze_app_usage_patterns,
)
from activity_insights.analysis.time_buckets import (
    analyze_daily_patterns,
    analyze_weekly_patterns,
    bucket_productivity,
    calculate_trend,
    group_by_time,
    mine_time_patterns,
)
from activity_insights.engine import PatternAnalyzer

from conftest import HOUR, MINUTE, make_record

DAY = 24 * HOUR


class TestGroupByTime:
    def test_keys_are_day_and_hour_in_first_seen_order(self, settings):
        records = [
            make_record(0),
            make_record(2 * HOUR),
            make_record(10 * MINUTE),
            make_record(DAY),
        ]

        buckets = group_by_time(records, settings)

        assert list(buckets) == [(0, 9), (0, 11), (1, 9)]
        assert len(buckets[(0, 9)]) == 2


class TestDailyPatterns:
    def test_scenario_four_editor_records_on_monday(self, settings):
        records = [make_record(i * 10 * MINUTE, focus_score=0.8) for i in range(4)]

        daily = analyze_daily_patterns(group_by_time(records, settings), settings)

        assert len(daily) == 1
        assert daily[0].name == "Daily Pattern - Monday"
        assert daily[0].confidence == pytest.approx(0.4)
        assert daily[0].productivity_impact == "positive"

        accepted = PatternAnalyzer(settings).identify_recurring_work_patterns(records)
        assert all(p.name != "Daily Pattern - Monday" for p in accepted)

    def test_day_below_min_occurrences_is_skipped(self, settings):
        records = [make_record(0), make_record(DAY), make_record(DAY + MINUTE)]

        daily = analyze_daily_patterns(group_by_time(records, settings), settings)

        assert daily == []

    def test_confidence_is_capped(self, settings):
        records = [make_record(i * MINUTE, focus_score=0.1) for i in range(15)]

        (pattern,) = analyze_daily_patterns(group_by_time(records, settings), settings)

        assert pattern.confidence == pytest.approx(0.9)
        assert pattern.frequency == 15
        assert pattern.productivity_impact == "negative"

    def test_associated_apps_are_unique(self, settings):
        records = [
            make_record(0, "Editor"),
            make_record(MINUTE, "Browser"),
            make_record(2 * MINUTE, "Editor"),
        ]

        (pattern,) = analyze_daily_patterns(group_by_time(records, settings), settings)

        assert pattern.associated_apps == ["Editor", "Browser"]


class TestWeeklyPatterns:
    def test_single_bucket_yields_nothing(self, settings):
        records = [make_record(0), make_record(MINUTE)]

        assert analyze_weekly_patterns(group_by_time(records, settings), settings) == []

    @pytest.mark.parametrize(
        "first, last, label, impact",
        [
            (0.4, 0.8, "improving", "positive"),
            (0.8, 0.4, "declining", "negative"),
            (0.5, 0.52, "stable", "neutral"),
        ],
    )
    def test_trend_over_bucket_series(self, settings, first, last, label, impact):
        records = [
            make_record(0, focus_score=first),
            make_record(HOUR, focus_score=0.5),
            make_record(2 * HOUR, focus_score=last),
        ]

        (pattern,) = analyze_weekly_patterns(group_by_time(records, settings), settings)

        assert pattern.type == "weekly"
        assert pattern.description.endswith(label)
        assert pattern.productivity_impact == impact
        assert pattern.frequency == 3
        assert pattern.confidence == pytest.approx(0.75)

    def test_series_follows_bucket_insertion_order(self, settings):
        # Later hour first: the series is not re-sorted by time of day.
        records = [make_record(3 * HOUR, focus_score=0.9), make_record(0, focus_score=0.3)]

        series = bucket_productivity(group_by_time(records, settings))

        assert series == [0.9, 0.3]

    def test_calculate_trend(self):
        assert calculate_trend([0.5, 0.75]) == pytest.approx(0.5)
        assert calculate_trend([0.5]) == 0.0
        assert calculate_trend([0.0, 0.0]) == 0.0
        assert math.isinf(calculate_trend([0.0, 0.4]))

    def test_mine_time_patterns_combines_daily_and_weekly(self, settings):
        records = [make_record(i * HOUR) for i in range(4)]

        patterns = mine_time_patterns(records, settings)

        assert [p.type for p in patterns] == ["daily", "weekly"]


class TestAppUsagePatterns:
    def test_aggregates_per_app(self):
        records = [
            make_record(0, "Editor", duration=MINUTE, focus_score=0.6),
            make_record(MINUTE, "Editor", duration=2 * MINUTE, focus_score=None),
            make_record(3 * MINUTE, "Chat", duration=MINUTE),
        ]

        usage = aggregate_app_usage(records)

        assert usage["Editor"].total_duration == 3 * MINUTE
        assert usage["Editor"].count == 2
        assert usage["Editor"].average_focus == pytest.approx(0.3)

    def test_only_top_five_by_duration_are_considered(self, settings):
        records = []
        offset = 0
        for rank in range(6):
            for _ in range(3):
                records.append(
                    make_record(offset, f"App{rank}", duration=(10 - rank) * MINUTE)
                )
                offset += 10 * MINUTE

        patterns = analyze_app_usage_patterns(records, settings)

        assert [p.associated_apps for p in patterns] == [[f"App{i}"] for i in range(5)]

    def test_requires_min_occurrences(self, settings):
        records = [
            make_record(0, "Editor", duration=HOUR),
            make_record(HOUR, "Editor", duration=HOUR),
            make_record(2 * HOUR, "Chat", duration=MINUTE),
            make_record(3 * HOUR, "Chat", duration=MINUTE),
            make_record(4 * HOUR, "Chat", duration=MINUTE),
        ]

        (pattern,) = analyze_app_usage_patterns(records, settings)

        assert pattern.name == "Heavy App Usage - Chat"
        assert pattern.confidence == pytest.approx(3 / 20)
        assert pattern.frequency == 3

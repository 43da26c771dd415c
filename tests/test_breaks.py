"""Tests for break detection and break patterns."""

import pytest

from activity_insights.analysis.breaks import (
    analyze_break_durations,
    analyze_break_frequency,
    analyze_break_patterns,
    analyze_break_timing,
    break_intervals,
    identify_breaks,
)
from activity_insights.models import Break

from conftest import BASE_MS, HOUR, MINUTE, back_to_back, make_record


def scenario_b_records():
    """Five 2-minute Browser records separated by 6-minute gaps."""
    return back_to_back(["Browser"] * 5, duration=2 * MINUTE, gap=6 * MINUTE)


class TestIdentifyBreaks:
    @pytest.mark.parametrize(
        "gap, expected", [(5 * MINUTE, 1), (5 * MINUTE - 1, 0), (20 * MINUTE, 1)]
    )
    def test_gap_threshold_is_inclusive(self, settings, gap, expected):
        records = back_to_back(["Editor", "Browser"], duration=MINUTE, gap=gap)

        assert len(identify_breaks(records, settings)) == expected

    def test_break_spans_gap_and_names_neighbours(self, settings):
        records = back_to_back(["Editor", "Browser"], duration=MINUTE, gap=10 * MINUTE)

        (item,) = identify_breaks(records, settings)

        assert item.start == BASE_MS + MINUTE
        assert item.end == BASE_MS + 11 * MINUTE
        assert item.duration == 10 * MINUTE
        assert (item.before_app, item.after_app) == ("Editor", "Browser")

    def test_empty_and_single_record(self, settings):
        assert identify_breaks([], settings) == []
        assert identify_breaks([make_record(0)], settings) == []

    @pytest.mark.parametrize(
        "minutes, kind", [(5, "micro"), (14, "micro"), (15, "short"), (59, "short"), (60, "long")]
    )
    def test_break_kind(self, minutes, kind):
        assert Break(0, minutes * MINUTE).kind == kind


class TestScenarioB:
    def test_four_equal_breaks(self, settings):
        breaks = identify_breaks(scenario_b_records(), settings)

        assert [b.duration for b in breaks] == [6 * MINUTE] * 4

    def test_micro_break_duration_pattern(self, settings):
        breaks = identify_breaks(scenario_b_records(), settings)

        (pattern,) = analyze_break_durations(breaks, settings)

        assert pattern.type == "micro"
        assert pattern.duration == pytest.approx(360_000)

    def test_frequency_pattern_measures_time_between_breaks(self, settings):
        breaks = identify_breaks(scenario_b_records(), settings)

        (pattern,) = analyze_break_frequency(breaks, settings)

        # Each break ends where a 2-minute record starts; the next begins after it.
        assert break_intervals(breaks) == [2 * MINUTE] * 3
        assert pattern.type == "short"
        assert pattern.duration == pytest.approx(120_000)

    def test_full_break_analysis(self, settings):
        patterns = analyze_break_patterns(scenario_b_records(), settings)

        assert [(p.type, p.duration) for p in patterns] == [
            ("short", 0),
            ("micro", pytest.approx(360_000)),
            ("short", pytest.approx(120_000)),
        ]


class TestBreakTiming:
    def test_top_three_hours_with_enough_breaks(self, settings):
        breaks = []
        for hour, count in [(9, 3), (10, 5), (11, 4), (12, 3), (13, 2)]:
            start = BASE_MS + (hour - 9) * HOUR
            breaks += [Break(start + i * MINUTE, start + i * MINUTE + 1) for i in range(count)]

        patterns = analyze_break_timing(breaks, settings)

        assert len(patterns) == 3
        assert all(p.duration == 0 and p.type == "short" for p in patterns)
        assert all(p.before_activity == "" and p.after_activity == "" for p in patterns)
        hours = [(p.timestamp - BASE_MS) // HOUR + 9 for p in patterns]
        assert hours == [10, 11, 9]

    def test_output_is_deterministic(self, settings):
        records = scenario_b_records()

        first = [p.to_dict() for p in analyze_break_patterns(records, settings)]
        second = [p.to_dict() for p in analyze_break_patterns(records, settings)]

        assert first == second

    def test_too_few_breaks(self, settings):
        records = back_to_back(["Editor"] * 3, duration=MINUTE, gap=10 * MINUTE)

        assert analyze_break_patterns(records, settings) == []

"""Work habits synthesized from usage, timing, breaks, focus and switching."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..config import HOUR_MS, MINUTE_MS, AnalysisSettings
from ..focus import FocusSessionDetector, GapFocusDetector
from ..models import ActivityRecord, Impact, WorkHabit
from .breaks import break_intervals, identify_breaks
from .common import (
    average_focus,
    hourly_productivity,
    impact_for,
    mean,
    new_id,
    now_ms,
    scaled_confidence,
)
from .switches import identify_context_switches

TIME_PREFERENCE_CONFIDENCE = 0.8
MULTITASKING_CONFIDENCE = 0.8


def analyze_app_usage_habits(
    records: Sequence[ActivityRecord], settings: AnalysisSettings
) -> list[WorkHabit]:
    by_app: dict[str, list[ActivityRecord]] = defaultdict(list)
    for record in records:
        by_app[record.app_name].append(record)

    habits: list[WorkHabit] = []
    for app_name, items in by_app.items():
        if len(items) < settings.min_pattern_occurrences:
            continue
        total_hours = sum(item.duration for item in items) / HOUR_MS
        impact = impact_for(average_focus(items), settings)
        habits.append(
            WorkHabit(
                id=new_id(f"app_habit_{app_name}"),
                type="app_usage",
                pattern=f"Regular use of {app_name}",
                frequency=len(items),
                confidence=scaled_confidence(len(items), 20),
                description=f"You frequently use {app_name} for {total_hours:.1f} hours total",
                impact=impact,
                recommendation=(
                    f"Consider limiting time spent on {app_name}"
                    if impact == "negative"
                    else None
                ),
                detected_at=now_ms(),
            )
        )
    return habits


def analyze_time_preference_habits(
    records: Sequence[ActivityRecord], settings: AnalysisSettings
) -> list[WorkHabit]:
    productivity = hourly_productivity(records, settings.timezone)
    preferred = sorted(
        hour for hour, value in productivity.items() if value > settings.preferred_hour_focus
    )
    if len(preferred) < 2:
        return []
    hours_text = ", ".join(str(hour) for hour in preferred)
    return [
        WorkHabit(
            id=new_id("time_preference"),
            type="time_preference",
            pattern=f"Productive during {preferred[0]}:00-{preferred[-1]}:00",
            frequency=len(preferred),
            confidence=TIME_PREFERENCE_CONFIDENCE,
            description=f"You are most productive during {hours_text} o'clock hours",
            impact="positive",
            recommendation=f"Schedule important tasks during your peak hours: {hours_text}",
            detected_at=now_ms(),
        )
    ]


def analyze_break_timing_habits(
    records: Sequence[ActivityRecord], settings: AnalysisSettings
) -> list[WorkHabit]:
    breaks = identify_breaks(records, settings)
    if len(breaks) < settings.min_pattern_occurrences:
        return []

    interval_hours = mean(break_intervals(breaks)) / HOUR_MS
    impact: Impact = "positive"
    recommendation: Optional[str] = None
    if interval_hours > settings.max_break_interval_hours:
        impact = "negative"
        recommendation = "Consider taking more frequent breaks"
    elif interval_hours < settings.min_break_interval_hours:
        impact = "negative"
        recommendation = "Your breaks might be too frequent"

    return [
        WorkHabit(
            id=new_id("break_timing"),
            type="break_timing",
            pattern=f"Takes breaks every {interval_hours:.1f} hours",
            frequency=len(breaks),
            confidence=scaled_confidence(len(breaks), 10),
            description=f"You typically take breaks every {interval_hours:.1f} hours",
            impact=impact,
            recommendation=recommendation,
            detected_at=now_ms(),
        )
    ]


def analyze_focus_duration_habits(
    records: Sequence[ActivityRecord],
    settings: AnalysisSettings,
    detector: FocusSessionDetector,
) -> list[WorkHabit]:
    sessions = detector.identify_focus_sessions(records)
    if len(sessions) < settings.min_pattern_occurrences:
        return []

    minutes = mean(session.duration for session in sessions) / MINUTE_MS
    impact: Impact = "neutral"
    if minutes > settings.long_focus_minutes:
        impact = "positive"
    elif minutes < settings.short_focus_minutes:
        impact = "negative"

    return [
        WorkHabit(
            id=new_id("focus_duration"),
            type="focus_duration",
            pattern=f"Average focus session: {minutes:.1f} minutes",
            frequency=len(sessions),
            confidence=scaled_confidence(len(sessions), 10),
            description=f"Your average focus session lasts {minutes:.1f} minutes",
            impact=impact,
            recommendation=(
                "Try to extend your focus sessions to at least 25 minutes"
                if impact == "negative"
                else None
            ),
            detected_at=now_ms(),
        )
    ]


def analyze_multitasking_habits(
    records: Sequence[ActivityRecord], settings: AnalysisSettings
) -> list[WorkHabit]:
    if len(records) < settings.min_pattern_occurrences:
        return []
    elapsed_hours = (records[-1].timestamp - records[0].timestamp) / HOUR_MS
    if elapsed_hours <= 0:
        return []

    switches = identify_context_switches(records)
    rate = len(switches) / elapsed_hours
    impact: Impact = "neutral"
    if rate > settings.high_switch_rate:
        impact = "negative"
    elif rate < settings.low_switch_rate:
        impact = "positive"

    return [
        WorkHabit(
            id=new_id("multitasking"),
            type="multitasking",
            pattern=f"{rate:.1f} context switches per hour",
            frequency=len(switches),
            confidence=MULTITASKING_CONFIDENCE,
            description=f"You switch between applications {rate:.1f} times per hour",
            impact=impact,
            recommendation=(
                "Try to reduce context switching by batching similar tasks"
                if impact == "negative"
                else None
            ),
            detected_at=now_ms(),
        )
    ]


def find_work_habits(
    records: Sequence[ActivityRecord],
    settings: Optional[AnalysisSettings] = None,
    detector: Optional[FocusSessionDetector] = None,
) -> list[WorkHabit]:
    settings = settings or AnalysisSettings()
    detector = detector or GapFocusDetector()
    habits = (
        analyze_app_usage_habits(records, settings)
        + analyze_time_preference_habits(records, settings)
        + analyze_break_timing_habits(records, settings)
        + analyze_focus_duration_habits(records, settings, detector)
        + analyze_multitasking_habits(records, settings)
    )
    return [
        habit
        for habit in habits
        if habit.confidence >= settings.min_confidence_threshold
    ]

"""Daily and weekly work patterns mined from (day, hour) buckets."""

from __future__ import annotations

import calendar
import math
from collections import defaultdict
from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..models import ActivityRecord, Impact, WorkPattern
from .common import (
    average_focus,
    day_of_week,
    hour_of_day,
    impact_for,
    new_id,
    now_ms,
    scaled_confidence,
)

TimeBuckets = dict[tuple[int, int], list[ActivityRecord]]


def group_by_time(
    records: Sequence[ActivityRecord], settings: AnalysisSettings
) -> TimeBuckets:
    """Group records by ``(day_of_week, hour_of_day)`` in first-seen order."""
    buckets: TimeBuckets = defaultdict(list)
    for record in records:
        key = (
            day_of_week(record.timestamp, settings.timezone),
            hour_of_day(record.timestamp, settings.timezone),
        )
        buckets[key].append(record)
    return dict(buckets)


def analyze_daily_patterns(
    buckets: TimeBuckets, settings: AnalysisSettings
) -> list[WorkPattern]:
    by_day: dict[int, list[ActivityRecord]] = defaultdict(list)
    for (day, _hour), records in buckets.items():
        by_day[day].extend(records)

    patterns: list[WorkPattern] = []
    for day, records in by_day.items():
        count = len(records)
        if count < settings.min_pattern_occurrences:
            continue
        name = day_name(day)
        stamp = now_ms()
        patterns.append(
            WorkPattern(
                id=new_id(f"daily_pattern_{day}"),
                type="daily",
                name=f"Daily Pattern - {name}",
                description=f"Consistent activity on {name} with {count} activities",
                frequency=count,
                confidence=scaled_confidence(count, 10),
                associated_apps=list(dict.fromkeys(r.app_name for r in records)),
                productivity_impact=impact_for(average_focus(records), settings),
                detected_at=stamp,
                last_seen=stamp,
            )
        )
    return patterns


def analyze_weekly_patterns(
    buckets: TimeBuckets, settings: AnalysisSettings
) -> list[WorkPattern]:
    """Emit one trend pattern over the per-bucket productivity series.

    The series is one average per ``(day, hour)`` bucket in bucket order, not
    a calendar-week aggregation.
    """
    series = bucket_productivity(buckets)
    if len(series) < 2:
        return []

    trend = calculate_trend(series)
    label, impact = _trend_label(trend, settings.trend_threshold)
    stamp = now_ms()
    return [
        WorkPattern(
            id=new_id("weekly_trend"),
            type="weekly",
            name="Weekly Productivity Trend",
            description=f"Weekly productivity trend: {label}",
            frequency=len(series),
            confidence=scaled_confidence(len(series), 4),
            associated_apps=[],
            productivity_impact=impact,
            detected_at=stamp,
            last_seen=stamp,
        )
    ]


def bucket_productivity(buckets: TimeBuckets) -> list[float]:
    return [average_focus(records) for records in buckets.values()]


def calculate_trend(values: Sequence[float]) -> float:
    """Relative change from the first to the last value."""
    if len(values) < 2:
        return 0.0
    first, last = values[0], values[-1]
    if first == 0:
        return math.inf if last > 0 else 0.0
    return (last - first) / first


def day_name(day: int) -> str:
    if 0 <= day < 7:
        return calendar.day_name[day]
    return "Unknown"


def _trend_label(trend: float, threshold: float) -> tuple[str, Impact]:
    if trend > threshold:
        return "improving", "positive"
    if trend < -threshold:
        return "declining", "negative"
    return "stable", "neutral"


def mine_time_patterns(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[WorkPattern]:
    settings = settings or AnalysisSettings()
    buckets = group_by_time(records, settings)
    return analyze_daily_patterns(buckets, settings) + analyze_weekly_patterns(
        buckets, settings
    )

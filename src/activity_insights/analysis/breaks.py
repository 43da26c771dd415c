"""Break detection and break habits."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..models import ActivityRecord, Break, BreakPattern
from .common import hour_of_day, mean

TOP_BREAK_HOURS = 3


def identify_breaks(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[Break]:
    """Gaps between consecutive records of at least ``break_threshold`` ms."""
    settings = settings or AnalysisSettings()
    breaks: list[Break] = []
    for previous, current in zip(records, records[1:]):
        if current.timestamp - previous.end >= settings.break_threshold:
            breaks.append(
                Break(
                    start=previous.end,
                    end=current.timestamp,
                    before_app=previous.app_name,
                    after_app=current.app_name,
                )
            )
    return breaks


def break_intervals(breaks: Sequence[Break]) -> list[int]:
    """Time from the end of each break to the start of the next."""
    return [current.start - previous.end for previous, current in zip(breaks, breaks[1:])]


def analyze_break_timing(
    breaks: Sequence[Break], settings: AnalysisSettings
) -> list[BreakPattern]:
    by_hour: dict[int, list[Break]] = defaultdict(list)
    for item in breaks:
        by_hour[hour_of_day(item.start, settings.timezone)].append(item)

    counts = Counter({hour: len(items) for hour, items in by_hour.items()})
    frequent = [
        hour
        for hour, count in counts.most_common()
        if count >= settings.min_pattern_occurrences
    ][:TOP_BREAK_HOURS]
    return [
        BreakPattern(timestamp=by_hour[hour][-1].start, duration=0, type="short")
        for hour in frequent
    ]


def analyze_break_durations(
    breaks: Sequence[Break], settings: AnalysisSettings
) -> list[BreakPattern]:
    micro = [item for item in breaks if item.duration < settings.micro_break_max]
    if len(micro) < settings.min_pattern_occurrences:
        return []
    return [
        BreakPattern(
            timestamp=micro[-1].start,
            duration=mean(item.duration for item in micro),
            type="micro",
        )
    ]


def analyze_break_frequency(
    breaks: Sequence[Break], settings: AnalysisSettings
) -> list[BreakPattern]:
    if len(breaks) < settings.min_pattern_occurrences:
        return []
    return [
        BreakPattern(
            timestamp=breaks[-1].start,
            duration=mean(break_intervals(breaks)),
            type="short",
        )
    ]


def analyze_break_patterns(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[BreakPattern]:
    settings = settings or AnalysisSettings()
    breaks = identify_breaks(records, settings)
    return (
        analyze_break_timing(breaks, settings)
        + analyze_break_durations(breaks, settings)
        + analyze_break_frequency(breaks, settings)
    )

"""Peak hours and productivity cycles across the day."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..config import AnalysisSettings
from ..models import ActivityRecord, CycleType, ProductivityCycle, WorkPattern
from .common import hourly_productivity, new_id, now_ms

CYCLE_PRODUCTIVITY: dict[CycleType, float] = {"peak": 0.8, "moderate": 0.5, "low": 0.2}
CYCLE_CONSISTENCY = 0.8
CYCLE_CONFIDENCE = 0.8
PEAK_PATTERN_CONFIDENCE = 0.8
CYCLE_ORDER: tuple[CycleType, ...] = ("peak", "low", "moderate")


def classify_hours(
    productivity: dict[int, float], settings: AnalysisSettings
) -> dict[CycleType, list[int]]:
    """Split hours into peak/low/moderate sets, each sorted ascending."""
    classes: dict[CycleType, list[int]] = {"peak": [], "low": [], "moderate": []}
    for hour in sorted(productivity):
        value = productivity[hour]
        if value > settings.high_focus:
            classes["peak"].append(hour)
        elif value < settings.low_focus:
            classes["low"].append(hour)
        else:
            classes["moderate"].append(hour)
    return classes


def consecutive_runs(hours: Iterable[int]) -> list[list[int]]:
    """Group hours into maximal runs of consecutive integers.

    Hours are sorted before the scan; run detection relies on that order.
    """
    runs: list[list[int]] = []
    for hour in sorted(set(hours)):
        if runs and hour == runs[-1][-1] + 1:
            runs[-1].append(hour)
        else:
            runs.append([hour])
    return runs


def build_cycles(
    hours: Iterable[int], cycle_type: CycleType, settings: AnalysisSettings
) -> list[ProductivityCycle]:
    return [
        ProductivityCycle(
            id=new_id(f"cycle_{cycle_type}_{run[0]}"),
            start_hour=run[0],
            end_hour=run[-1],
            type=cycle_type,
            average_productivity=CYCLE_PRODUCTIVITY[cycle_type],
            consistency=CYCLE_CONSISTENCY,
            days_observed=settings.productivity_cycle_min_days,
            confidence=CYCLE_CONFIDENCE,
        )
        for run in consecutive_runs(hours)
    ]


def detect_productivity_cycles(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[ProductivityCycle]:
    settings = settings or AnalysisSettings()
    classes = classify_hours(hourly_productivity(records, settings.timezone), settings)
    cycles: list[ProductivityCycle] = []
    for cycle_type in CYCLE_ORDER:
        cycles.extend(build_cycles(classes[cycle_type], cycle_type, settings))
    return [
        cycle
        for cycle in cycles
        if cycle.confidence >= settings.min_confidence_threshold
    ]


def analyze_productivity_patterns(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[WorkPattern]:
    """Summarize peak hours as a single daily work pattern."""
    settings = settings or AnalysisSettings()
    productivity = hourly_productivity(records, settings.timezone)
    peak_hours = classify_hours(productivity, settings)["peak"]
    if not peak_hours:
        return []
    stamp = now_ms()
    return [
        WorkPattern(
            id=new_id("productivity_peak"),
            type="daily",
            name="Peak Productivity Hours",
            description="Peak productivity during hours: "
            + ", ".join(str(hour) for hour in peak_hours),
            frequency=len(peak_hours),
            confidence=PEAK_PATTERN_CONFIDENCE,
            associated_apps=[],
            productivity_impact="positive",
            detected_at=stamp,
            last_seen=stamp,
        )
    ]

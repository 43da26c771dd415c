"""Context switches between applications."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..models import (
    ActivityRecord,
    ContextSwitch,
    ContextSwitchPattern,
    SwitchImpact,
    SwitchKind,
)
from .common import hour_of_day, mean, new_id

AppPair = tuple[str, str]


def identify_context_switches(records: Sequence[ActivityRecord]) -> list[ContextSwitch]:
    """Every pair of consecutive records naming different applications."""
    return [
        ContextSwitch(
            from_app=previous.app_name,
            to_app=current.app_name,
            timestamp=current.timestamp,
            duration=current.timestamp - previous.end,
        )
        for previous, current in zip(records, records[1:])
        if previous.app_name != current.app_name
    ]


def group_switches_by_pair(
    switches: Sequence[ContextSwitch],
) -> dict[AppPair, list[ContextSwitch]]:
    grouped: dict[AppPair, list[ContextSwitch]] = defaultdict(list)
    for item in switches:
        grouped[(item.from_app, item.to_app)].append(item)
    return dict(grouped)


def average_switch_duration(switches: Sequence[ContextSwitch]) -> float:
    # Adjacent records can report a negative gap; it counts as zero.
    return mean(max(0, item.duration) for item in switches)


def assess_switch_impact(
    average_duration: float, settings: AnalysisSettings
) -> SwitchImpact:
    if average_duration < settings.disruptive_switch_gap:
        return "disruptive"
    if average_duration > settings.beneficial_switch_gap:
        return "beneficial"
    return "neutral"


def classify_switch_pattern(hours: Sequence[int], settings: AnalysisSettings) -> SwitchKind:
    if len(set(hours)) <= settings.habitual_max_hours:
        return "habitual"
    if len(hours) > settings.reactive_min_switches:
        return "reactive"
    return "planned"


def analyze_context_switching_patterns(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[ContextSwitchPattern]:
    settings = settings or AnalysisSettings()
    patterns: list[ContextSwitchPattern] = []
    grouped = group_switches_by_pair(identify_context_switches(records))
    for (from_app, to_app), switches in grouped.items():
        if len(switches) < settings.min_pattern_occurrences:
            continue
        hours = [hour_of_day(item.timestamp, settings.timezone) for item in switches]
        average = average_switch_duration(switches)
        patterns.append(
            ContextSwitchPattern(
                id=new_id(f"switch_{from_app}_{to_app}"),
                from_app=from_app,
                to_app=to_app,
                frequency=len(switches),
                average_duration=average,
                time_of_day=hours,
                impact=assess_switch_impact(average, settings),
                pattern=classify_switch_pattern(hours, settings),
            )
        )
    return patterns

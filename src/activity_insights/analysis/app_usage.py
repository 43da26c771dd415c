"""Heavy application usage patterns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..models import ActivityRecord, WorkPattern
from .common import impact_for, new_id, now_ms, scaled_confidence

TOP_APPS = 5


@dataclass(slots=True)
class AppUsage:
    app_name: str
    total_duration: int = 0
    count: int = 0
    focus_total: float = 0.0

    @property
    def average_focus(self) -> float:
        return self.focus_total / self.count if self.count else 0.0


def aggregate_app_usage(records: Sequence[ActivityRecord]) -> dict[str, AppUsage]:
    usage: dict[str, AppUsage] = {}
    for record in records:
        entry = usage.get(record.app_name)
        if entry is None:
            entry = usage[record.app_name] = AppUsage(record.app_name)
        entry.total_duration += record.duration
        entry.count += 1
        entry.focus_total += record.focus
    return usage


def analyze_app_usage_patterns(
    records: Sequence[ActivityRecord], settings: Optional[AnalysisSettings] = None
) -> list[WorkPattern]:
    settings = settings or AnalysisSettings()
    ranked = sorted(
        aggregate_app_usage(records).values(),
        key=lambda entry: entry.total_duration,
        reverse=True,
    )[:TOP_APPS]

    patterns: list[WorkPattern] = []
    for entry in ranked:
        if entry.count < settings.min_pattern_occurrences:
            continue
        stamp = now_ms()
        patterns.append(
            WorkPattern(
                id=new_id(f"app_usage_{entry.app_name}"),
                type="daily",
                name=f"Heavy App Usage - {entry.app_name}",
                description=f"Heavy usage of {entry.app_name}",
                frequency=entry.count,
                confidence=scaled_confidence(entry.count, 20),
                associated_apps=[entry.app_name],
                productivity_impact=impact_for(entry.average_focus, settings),
                detected_at=stamp,
                last_seen=stamp,
            )
        )
    return patterns

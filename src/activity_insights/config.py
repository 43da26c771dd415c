"""Configuration models and helpers for segmentation and analysis."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS


@dataclass(slots=True)
class SegmenterSettings:
    """Runtime configuration for the activity segmenter."""

    tick_ms: int = 1000
    normalize_titles: bool = True


@dataclass(slots=True)
class AnalysisSettings:
    """Thresholds shared by the pattern miners.

    Durations are milliseconds. ``timezone`` controls how hour-of-day and
    day-of-week are derived from timestamps; ``None`` means the local zone.
    """

    min_pattern_occurrences: int = 3
    min_confidence_threshold: float = 0.6
    focus_block_min_duration: int = 15 * MINUTE_MS
    break_threshold: int = 5 * MINUTE_MS
    sustained_gap_threshold: int = 5 * MINUTE_MS
    productivity_cycle_min_days: int = 5

    high_focus: float = 0.7
    low_focus: float = 0.3
    preferred_hour_focus: float = 0.6
    trend_threshold: float = 0.1

    micro_break_max: int = 15 * MINUTE_MS
    min_break_interval_hours: float = 1.0
    max_break_interval_hours: float = 3.0

    short_focus_minutes: float = 15.0
    long_focus_minutes: float = 45.0

    low_switch_rate: float = 10.0
    high_switch_rate: float = 30.0
    disruptive_switch_gap: int = 10_000
    beneficial_switch_gap: int = 5 * MINUTE_MS
    habitual_max_hours: int = 2
    reactive_min_switches: int = 10

    timezone: Optional[tzinfo] = None

    @classmethod
    def from_minutes(
        cls,
        break_minutes: float = 5.0,
        focus_block_minutes: float = 15.0,
        sustained_gap_minutes: float | None = None,
        timezone: Optional[tzinfo] = None,
    ) -> "AnalysisSettings":
        sustained = (
            sustained_gap_minutes if sustained_gap_minutes is not None else break_minutes
        )
        return cls(
            break_threshold=int(break_minutes * MINUTE_MS),
            focus_block_min_duration=int(focus_block_minutes * MINUTE_MS),
            sustained_gap_threshold=int(sustained * MINUTE_MS),
            timezone=timezone,
        )

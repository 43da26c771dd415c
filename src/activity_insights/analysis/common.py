"""Helpers shared by the pattern miners."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional, Sequence

from ..config import AnalysisSettings
from ..models import ActivityRecord, Impact


def local_datetime(timestamp_ms: int, tz: Optional[tzinfo]) -> datetime:
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.astimezone(tz) if tz is not None else moment.astimezone()


def hour_of_day(timestamp_ms: int, tz: Optional[tzinfo] = None) -> int:
    return local_datetime(timestamp_ms, tz).hour


def day_of_week(timestamp_ms: int, tz: Optional[tzinfo] = None) -> int:
    """Monday is 0."""
    return local_datetime(timestamp_ms, tz).weekday()


def mean(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def average_focus(records: Sequence[ActivityRecord]) -> float:
    return mean(record.focus for record in records)


def impact_for(focus: float, settings: AnalysisSettings) -> Impact:
    if focus > settings.high_focus:
        return "positive"
    if focus < settings.low_focus:
        return "negative"
    return "neutral"


def scaled_confidence(count: int, scale: float, cap: float = 0.9) -> float:
    return min(cap, count / scale)


def group_by_hour(
    records: Iterable[ActivityRecord], tz: Optional[tzinfo] = None
) -> dict[int, list[ActivityRecord]]:
    grouped: dict[int, list[ActivityRecord]] = defaultdict(list)
    for record in records:
        grouped[hour_of_day(record.timestamp, tz)].append(record)
    return dict(grouped)


def hourly_productivity(
    records: Iterable[ActivityRecord], tz: Optional[tzinfo] = None
) -> dict[int, float]:
    """Average focus score per hour of day, keyed in first-seen order."""
    return {
        hour: average_focus(items) for hour, items in group_by_hour(records, tz).items()
    }


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def now_ms() -> int:
    return int(time.time() * 1000)

"""Shared fixtures for activity insights tests.

Timestamps are built from ``BASE_MS``, Monday 2024-01-01 09:00 UTC, and every
analysis fixture derives hours and days in UTC so results do not depend on the
machine's timezone.
"""

from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest

from activity_insights.config import AnalysisSettings
from activity_insights.models import ActivityRecord, FocusSession

MINUTE = 60_000
HOUR = 60 * MINUTE
BASE_MS = int(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc).timestamp() * 1000)


def make_record(
    offset_ms: int,
    app_name: str = "Editor",
    duration: int = 10 * MINUTE,
    focus_score: float | None = 0.5,
    window_title: str = "",
    **extra,
) -> ActivityRecord:
    return ActivityRecord(
        timestamp=BASE_MS + offset_ms,
        app_name=app_name,
        window_title=window_title,
        duration=duration,
        focus_score=focus_score,
        **extra,
    )


def back_to_back(
    apps: list[str], duration: int = MINUTE, gap: int = 0, focus_score: float = 0.5
) -> list[ActivityRecord]:
    """Records for ``apps`` in order, each ``duration`` long, ``gap`` apart."""
    records = []
    offset = 0
    for app_name in apps:
        records.append(make_record(offset, app_name, duration, focus_score))
        offset += duration + gap
    return records


class StubFocusDetector:
    """Focus detector returning canned sessions."""

    def __init__(self, sessions: list[FocusSession]) -> None:
        self.sessions = sessions
        self.calls = 0

    def identify_focus_sessions(self, records):
        self.calls += 1
        return list(self.sessions)


@pytest.fixture
def settings() -> AnalysisSettings:
    return AnalysisSettings(timezone=timezone.utc)


@pytest.fixture
def temp_db(tmp_path: Path) -> Generator[Path, None, None]:
    """Path to a database file removed with the test's temp directory."""
    yield tmp_path / "activity.sqlite3"

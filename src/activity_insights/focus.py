"""Focus session detection.

The pattern engine only depends on ``FocusSessionDetector``; ``GapFocusDetector``
is the default implementation used when no other detector is supplied.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence

from .models import ActivityRecord, FocusSession

MIN_SESSION_MS = 300_000
SIGNIFICANT_GAP_MS = 180_000
INTERRUPTION_GAP_MS = 30_000
PERFECT_SESSION_MS = 30 * 60 * 1000


class FocusSessionDetector(Protocol):
    def identify_focus_sessions(
        self, records: Sequence[ActivityRecord]
    ) -> list[FocusSession]:
        """Return focus sessions sorted ascending by start time."""
        ...


class GapFocusDetector:
    """Groups same-app runs into sessions, splitting on long gaps."""

    def __init__(
        self,
        min_session_ms: int = MIN_SESSION_MS,
        significant_gap_ms: int = SIGNIFICANT_GAP_MS,
        interruption_gap_ms: int = INTERRUPTION_GAP_MS,
    ) -> None:
        self.min_session_ms = min_session_ms
        self.significant_gap_ms = significant_gap_ms
        self.interruption_gap_ms = interruption_gap_ms

    def identify_focus_sessions(
        self, records: Sequence[ActivityRecord]
    ) -> list[FocusSession]:
        sessions: list[FocusSession] = []
        run: list[ActivityRecord] = []
        for record in records:
            if run and (
                record.app_name != run[0].app_name
                or _gap(run[-1], record) > self.significant_gap_ms
            ):
                self._close(run, sessions)
                run = []
            run.append(record)
        self._close(run, sessions)
        return sessions

    def _close(self, run: list[ActivityRecord], sessions: list[FocusSession]) -> None:
        if not run:
            return
        session = FocusSession(
            start_time=run[0].timestamp,
            end_time=run[-1].end,
            app_name=run[0].app_name,
            interruptions=self._count_interruptions(run),
            focus_score=self._session_score(run),
            keystrokes=sum(record.keystrokes or 0 for record in run),
            mouse_clicks=sum(record.mouse_clicks or 0 for record in run),
        )
        if session.duration >= self.min_session_ms:
            sessions.append(session)

    def _count_interruptions(self, run: Sequence[ActivityRecord]) -> int:
        return sum(
            1
            for previous, current in zip(run, run[1:])
            if self.interruption_gap_ms < _gap(previous, current) < self.significant_gap_ms
        )

    def _session_score(self, run: Sequence[ActivityRecord]) -> float:
        active = sum(record.duration for record in run)
        score = min(1.0, active / PERFECT_SESSION_MS)
        score -= min(0.5, self._count_interruptions(run) * 0.1)
        score += _activity_consistency(run) * 0.2
        return max(0.0, min(1.0, score))


def _gap(previous: ActivityRecord, current: ActivityRecord) -> int:
    return current.timestamp - previous.end


def _activity_consistency(run: Sequence[ActivityRecord]) -> float:
    if len(run) < 2:
        return 0.0
    keystrokes = [float(record.keystrokes or 0) for record in run]
    clicks = [float(record.mouse_clicks or 0) for record in run]
    keystroke_consistency = max(0.0, 1 - _coefficient_of_variation(keystrokes))
    click_consistency = max(0.0, 1 - _coefficient_of_variation(clicks))
    return (keystroke_consistency + click_consistency) / 2


def _coefficient_of_variation(values: Sequence[float]) -> float:
    if not values:
        return 1.0
    mean = sum(values) / len(values)
    if mean == 0:
        return 0.0
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return math.sqrt(variance) / mean

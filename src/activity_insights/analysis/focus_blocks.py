"""Focus blocks built on top of the focus session detector."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..focus import FocusSessionDetector, GapFocusDetector
from ..models import ActivityRecord, FocusSession


def enhance_focus_session(
    session: FocusSession, records: Sequence[ActivityRecord]
) -> FocusSession:
    """Recount keystrokes and clicks from the records inside the session."""
    inside = [
        record
        for record in records
        if session.start_time <= record.timestamp <= session.end_time
    ]
    return replace(
        session,
        keystrokes=sum(record.keystrokes or 0 for record in inside),
        mouse_clicks=sum(record.mouse_clicks or 0 for record in inside),
    )


def merge_sessions(first: FocusSession, second: FocusSession) -> FocusSession:
    return FocusSession(
        start_time=first.start_time,
        end_time=second.end_time,
        app_name=first.app_name,
        category=first.category,
        interruptions=first.interruptions + second.interruptions,
        focus_score=(first.focus_score + second.focus_score) / 2,
        keystrokes=first.keystrokes + second.keystrokes,
        mouse_clicks=first.mouse_clicks + second.mouse_clicks,
    )


def detect_sustained_focus_blocks(
    sessions: Sequence[FocusSession], settings: AnalysisSettings
) -> list[FocusSession]:
    """One merged block per adjacent same-app pair separated by a short gap."""
    return [
        merge_sessions(current, following)
        for current, following in zip(sessions, sessions[1:])
        if following.start_time - current.end_time <= settings.sustained_gap_threshold
        and current.app_name == following.app_name
    ]


def detect_focus_blocks(
    records: Sequence[ActivityRecord],
    settings: Optional[AnalysisSettings] = None,
    detector: Optional[FocusSessionDetector] = None,
) -> list[FocusSession]:
    settings = settings or AnalysisSettings()
    detector = detector or GapFocusDetector()
    blocks = [
        enhance_focus_session(session, records)
        for session in detector.identify_focus_sessions(records)
        if session.duration >= settings.focus_block_min_duration
    ]
    return blocks + detect_sustained_focus_blocks(blocks, settings)

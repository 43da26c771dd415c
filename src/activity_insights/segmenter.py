"""Coalesce per-tick window observations into activity records."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import SegmenterSettings
from .models import ActivityRecord, Observation
from .normalization import extract_url, normalize_app_name, normalize_window_title

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SegmenterState:
    current: Optional[ActivityRecord] = None

    @property
    def tracking(self) -> bool:
        return self.current is not None


class ActivitySegmenter:
    """Tracks one open span and flushes it whenever the foreground changes.

    The segmenter is idle until the first observation arrives. While tracking,
    an observation naming the same app and title extends the open span by one
    tick; anything else flushes the span and opens a new one. ``stop`` flushes
    whatever is open. Spans of zero duration are never emitted.
    """

    def __init__(self, settings: Optional[SegmenterSettings] = None) -> None:
        self.settings = settings or SegmenterSettings()
        self._state = SegmenterState()
        self._flushed: list[ActivityRecord] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[ActivityRecord]:
        return self._state.current

    @property
    def is_tracking(self) -> bool:
        return self._state.tracking

    def feed(self, observation: Observation) -> Optional[ActivityRecord]:
        """Consume one observation; return the record it closed, if any."""
        app_name = normalize_app_name(observation.app_name)
        window_title = self._title_for(app_name, observation.window_title)
        with self._lock:
            current = self._state.current
            if current and self._matches(current, app_name, window_title):
                self._extend(current, observation)
                return None

            flushed = self._flush_locked()
            self._state.current = self._open(observation, app_name, window_title)
            return flushed

    def stop(self) -> Optional[ActivityRecord]:
        """Flush the open span (if any) and return to idle."""
        with self._lock:
            return self._flush_locked()

    def drain(self) -> list[ActivityRecord]:
        """Hand back every record flushed since the last drain."""
        with self._lock:
            records = list(self._flushed)
            self._flushed.clear()
        return records

    def _open(
        self, observation: Observation, app_name: str, window_title: str
    ) -> ActivityRecord:
        duration = (
            observation.duration
            if observation.duration is not None
            else self.settings.tick_ms
        )
        return ActivityRecord(
            timestamp=observation.timestamp,
            app_name=app_name,
            window_title=window_title,
            duration=duration,
            focus_score=observation.focus_score,
            cpu_usage=observation.cpu_usage,
            keystrokes=observation.keystrokes,
            mouse_clicks=observation.mouse_clicks,
            is_idle=observation.is_idle,
            url=extract_url(app_name, observation.window_title),
        )

    def _extend(self, current: ActivityRecord, observation: Observation) -> None:
        current.duration += (
            observation.duration
            if observation.duration is not None
            else self.settings.tick_ms
        )
        if observation.focus_score is not None:
            current.focus_score = observation.focus_score
        if observation.cpu_usage is not None:
            current.cpu_usage = observation.cpu_usage
        current.keystrokes = (current.keystrokes or 0) + (observation.keystrokes or 0)
        current.mouse_clicks = (current.mouse_clicks or 0) + (
            observation.mouse_clicks or 0
        )
        current.is_idle = observation.is_idle

    def _flush_locked(self) -> Optional[ActivityRecord]:
        current = self._state.current
        self._state.current = None
        if current is None:
            return None
        if current.duration <= 0:
            logger.debug("Dropping empty span for %s", current.app_name)
            return None
        self._flushed.append(current)
        logger.debug(
            "Span flushed: app=%s title=%s duration=%dms",
            current.app_name,
            current.window_title,
            current.duration,
        )
        return current

    def _title_for(self, app_name: str, window_title: Optional[str]) -> str:
        if self.settings.normalize_titles:
            return normalize_window_title(app_name, window_title)
        return (window_title or "").strip()

    @staticmethod
    def _matches(record: ActivityRecord, app_name: str, window_title: str) -> bool:
        return record.app_name == app_name and record.window_title == window_title


def segment(
    observations: Iterable[Observation],
    settings: Optional[SegmenterSettings] = None,
) -> list[ActivityRecord]:
    """Run a finite observation sequence through a fresh segmenter."""
    segmenter = ActivitySegmenter(settings)
    for observation in observations:
        segmenter.feed(observation)
    segmenter.stop()
    records = segmenter.drain()
    logger.debug("Segmented observations into %d records.", len(records))
    return records

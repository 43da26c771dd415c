"""Entry points that run the pattern miners over an activity history."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .analysis.app_usage import analyze_app_usage_patterns
from .analysis.breaks import analyze_break_patterns
from .analysis.cycles import analyze_productivity_patterns, detect_productivity_cycles
from .analysis.focus_blocks import detect_focus_blocks
from .analysis.habits import find_work_habits
from .analysis.switches import analyze_context_switching_patterns
from .analysis.time_buckets import mine_time_patterns
from .config import AnalysisSettings
from .focus import FocusSessionDetector, GapFocusDetector
from .models import (
    ActivityRecord,
    AnalysisReport,
    BreakPattern,
    ContextSwitchPattern,
    FocusSession,
    ProductivityCycle,
    WorkHabit,
    WorkPattern,
)

logger = logging.getLogger(__name__)


class PatternAnalyzer:
    """Stateless facade over the individual miners.

    Every call recomputes from the records it is given. Exceptions raised by
    the focus session detector propagate unchanged.
    """

    def __init__(
        self,
        settings: Optional[AnalysisSettings] = None,
        focus_detector: Optional[FocusSessionDetector] = None,
    ) -> None:
        self.settings = settings or AnalysisSettings()
        self.focus_detector = focus_detector or GapFocusDetector()

    def identify_recurring_work_patterns(
        self, records: Sequence[ActivityRecord]
    ) -> list[WorkPattern]:
        patterns = (
            mine_time_patterns(records, self.settings)
            + analyze_app_usage_patterns(records, self.settings)
            + analyze_productivity_patterns(records, self.settings)
        )
        accepted = [
            pattern
            for pattern in patterns
            if pattern.confidence >= self.settings.min_confidence_threshold
        ]
        logger.debug(
            "Work patterns: %d candidates, %d above confidence threshold.",
            len(patterns),
            len(accepted),
        )
        return accepted

    def detect_focus_blocks(self, records: Sequence[ActivityRecord]) -> list[FocusSession]:
        return detect_focus_blocks(records, self.settings, self.focus_detector)

    def analyze_break_patterns(
        self, records: Sequence[ActivityRecord]
    ) -> list[BreakPattern]:
        return analyze_break_patterns(records, self.settings)

    def find_work_habits(self, records: Sequence[ActivityRecord]) -> list[WorkHabit]:
        return find_work_habits(records, self.settings, self.focus_detector)

    def detect_productivity_cycles(
        self, records: Sequence[ActivityRecord]
    ) -> list[ProductivityCycle]:
        return detect_productivity_cycles(records, self.settings)

    def analyze_context_switching_patterns(
        self, records: Sequence[ActivityRecord]
    ) -> list[ContextSwitchPattern]:
        return analyze_context_switching_patterns(records, self.settings)

    def analyze_all(self, records: Sequence[ActivityRecord]) -> AnalysisReport:
        report = AnalysisReport(
            work_patterns=self.identify_recurring_work_patterns(records),
            focus_blocks=self.detect_focus_blocks(records),
            break_patterns=self.analyze_break_patterns(records),
            work_habits=self.find_work_habits(records),
            productivity_cycles=self.detect_productivity_cycles(records),
            context_switch_patterns=self.analyze_context_switching_patterns(records),
        )
        logger.info(
            "Analyzed %d records: %d patterns, %d habits, %d cycles.",
            len(records),
            len(report.work_patterns),
            len(report.work_habits),
            len(report.productivity_cycles),
        )
        return report

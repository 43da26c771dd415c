"""Console rendering of analysis reports."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from .models import AnalysisReport


class PatternReportPrinter:
    """Render human-readable insight summaries in the console."""

    def __init__(
        self,
        echo: Callable[[str], None] = print,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._echo = echo
        self._tz = tz

    def print_report(self, report: AnalysisReport, record_count: int) -> None:
        if record_count == 0:
            self._echo("No activity recorded for the selected range.")
            return

        self._echo(f"Insights from {record_count} activity records")
        self._echo("-" * 40)
        self._print_work_patterns(report)
        self._print_focus_blocks(report)
        self._print_breaks(report)
        self._print_habits(report)
        self._print_cycles(report)
        self._print_switches(report)

    def _section(self, title: str) -> None:
        self._echo("")
        self._echo(f"{title}:")

    def _print_work_patterns(self, report: AnalysisReport) -> None:
        if not report.work_patterns:
            return
        self._section("Work patterns")
        for pattern in report.work_patterns:
            self._echo(
                f"  {pattern.name:<40} {pattern.confidence:>4.0%}  "
                f"{pattern.productivity_impact}"
            )

    def _print_focus_blocks(self, report: AnalysisReport) -> None:
        if not report.focus_blocks:
            return
        self._section("Focus blocks")
        for block in report.focus_blocks:
            self._echo(
                f"  {self._clock(block.start_time)} {block.app_name[:28]:<28} "
                f"{format_duration(block.duration)}  score {block.focus_score:.2f}"
            )

    def _print_breaks(self, report: AnalysisReport) -> None:
        if not report.break_patterns:
            return
        self._section("Break patterns")
        for item in report.break_patterns:
            self._echo(f"  {item.type:<6} {format_duration(item.duration)}")

    def _print_habits(self, report: AnalysisReport) -> None:
        if not report.work_habits:
            return
        self._section("Habits")
        for habit in report.work_habits:
            self._echo(f"  [{habit.impact}] {habit.pattern}")
            if habit.recommendation:
                self._echo(f"      -> {habit.recommendation}")

    def _print_cycles(self, report: AnalysisReport) -> None:
        if not report.productivity_cycles:
            return
        self._section("Productivity cycles")
        for cycle in report.productivity_cycles:
            self._echo(
                f"  {cycle.start_hour:02d}:00-{cycle.end_hour:02d}:59  {cycle.type}"
            )

    def _print_switches(self, report: AnalysisReport) -> None:
        if not report.context_switch_patterns:
            return
        self._section("Context switches")
        for pattern in report.context_switch_patterns:
            label = f"{pattern.from_app} -> {pattern.to_app}"
            self._echo(
                f"  {label[:40]:<40} x{pattern.frequency:<4} "
                f"{pattern.impact:<10} {pattern.pattern}"
            )

    def _clock(self, timestamp_ms: int) -> str:
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
        moment = moment.astimezone(self._tz) if self._tz else moment.astimezone()
        return moment.strftime("%Y-%m-%d %H:%M")


def format_duration(milliseconds: float) -> str:
    total_seconds = int(round(milliseconds / 1000))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

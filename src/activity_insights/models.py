"""Domain models for recorded activity and the insights derived from it."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Optional

Impact = Literal["positive", "negative", "neutral"]
PatternType = Literal["daily", "weekly"]
BreakType = Literal["micro", "short", "long"]
HabitType = Literal[
    "app_usage", "time_preference", "break_timing", "focus_duration", "multitasking"
]
CycleType = Literal["peak", "moderate", "low"]
SwitchImpact = Literal["disruptive", "neutral", "beneficial"]
SwitchKind = Literal["habitual", "reactive", "planned"]

UNKNOWN_APP = "Unknown"

MICRO_BREAK_MAX_MS = 15 * 60 * 1000
SHORT_BREAK_MAX_MS = 60 * 60 * 1000


class _Serializable:
    __slots__ = ()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass(slots=True)
class Observation:
    """A single raw sample of the foreground window, taken once per tick."""

    timestamp: int
    app_name: str
    window_title: str = ""
    duration: Optional[int] = None
    focus_score: Optional[float] = None
    cpu_usage: Optional[float] = None
    keystrokes: Optional[int] = None
    mouse_clicks: Optional[int] = None
    is_idle: bool = False


@dataclass(slots=True)
class ActivityRecord(_Serializable):
    """One contiguous span of a single (application, window title) pair.

    Times are epoch milliseconds. Absent counters are stored as ``0``; an
    absent focus score stays ``None`` and reads as ``0.0`` through ``focus``.
    """

    timestamp: int
    app_name: str
    window_title: str = ""
    duration: int = 0
    focus_score: Optional[float] = None
    cpu_usage: Optional[float] = 0.0
    keystrokes: Optional[int] = 0
    mouse_clicks: Optional[int] = 0
    is_idle: bool = False
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.app_name:
            self.app_name = UNKNOWN_APP
        if self.window_title is None:
            self.window_title = ""
        self.cpu_usage = self.cpu_usage or 0.0
        self.keystrokes = self.keystrokes or 0
        self.mouse_clicks = self.mouse_clicks or 0

    @property
    def focus(self) -> float:
        return self.focus_score if self.focus_score is not None else 0.0

    @property
    def end(self) -> int:
        return self.timestamp + self.duration


@dataclass(slots=True)
class FocusSession(_Serializable):
    start_time: int
    end_time: int
    app_name: str
    category: str = "unknown"
    interruptions: int = 0
    focus_score: float = 0.0
    keystrokes: int = 0
    mouse_clicks: int = 0

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["duration"] = self.duration
        return payload


@dataclass(slots=True, frozen=True)
class Break:
    """Gap between two consecutive records long enough to count as a break."""

    start: int
    end: int
    before_app: str = ""
    after_app: str = ""

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def kind(self) -> BreakType:
        if self.duration < MICRO_BREAK_MAX_MS:
            return "micro"
        if self.duration < SHORT_BREAK_MAX_MS:
            return "short"
        return "long"


@dataclass(slots=True, frozen=True)
class ContextSwitch:
    from_app: str
    to_app: str
    timestamp: int
    duration: int


@dataclass(slots=True)
class WorkPattern(_Serializable):
    id: str
    type: PatternType
    name: str
    description: str
    frequency: int
    confidence: float
    associated_apps: list[str] = field(default_factory=list)
    productivity_impact: Impact = "neutral"
    detected_at: int = 0
    last_seen: int = 0


@dataclass(slots=True)
class BreakPattern(_Serializable):
    timestamp: int
    duration: float
    type: BreakType
    before_activity: str = ""
    after_activity: str = ""


@dataclass(slots=True)
class WorkHabit(_Serializable):
    id: str
    type: HabitType
    pattern: str
    frequency: int
    confidence: float
    description: str
    impact: Impact
    recommendation: Optional[str] = None
    detected_at: int = 0


@dataclass(slots=True)
class ProductivityCycle(_Serializable):
    id: str
    start_hour: int
    end_hour: int
    type: CycleType
    average_productivity: float
    consistency: float
    days_observed: int
    confidence: float


@dataclass(slots=True)
class ContextSwitchPattern(_Serializable):
    id: str
    from_app: str
    to_app: str
    frequency: int
    average_duration: float
    time_of_day: list[int]
    impact: SwitchImpact
    pattern: SwitchKind


@dataclass(slots=True)
class AnalysisReport(_Serializable):
    """Bundle of every analysis result computed over one history."""

    work_patterns: list[WorkPattern] = field(default_factory=list)
    focus_blocks: list[FocusSession] = field(default_factory=list)
    break_patterns: list[BreakPattern] = field(default_factory=list)
    work_habits: list[WorkHabit] = field(default_factory=list)
    productivity_cycles: list[ProductivityCycle] = field(default_factory=list)
    context_switch_patterns: list[ContextSwitchPattern] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "work_patterns": [item.to_dict() for item in self.work_patterns],
            "focus_blocks": [item.to_dict() for item in self.focus_blocks],
            "break_patterns": [item.to_dict() for item in self.break_patterns],
            "work_habits": [item.to_dict() for item in self.work_habits],
            "productivity_cycles": [item.to_dict() for item in self.productivity_cycles],
            "context_switch_patterns": [
                item.to_dict() for item in self.context_switch_patterns
            ],
        }

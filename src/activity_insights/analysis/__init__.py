"""Pattern miners over a materialized activity history.

Each miner is a pure function of the record sequence (and settings); none
keeps state between calls.
"""

from .app_usage import analyze_app_usage_patterns
from .breaks import analyze_break_patterns, identify_breaks
from .cycles import analyze_productivity_patterns, detect_productivity_cycles
from .focus_blocks import detect_focus_blocks
from .habits import find_work_habits
from .switches import analyze_context_switching_patterns, identify_context_switches
from .time_buckets import mine_time_patterns

__all__ = [
    "analyze_app_usage_patterns",
    "analyze_break_patterns",
    "analyze_context_switching_patterns",
    "analyze_productivity_patterns",
    "detect_focus_blocks",
    "detect_productivity_cycles",
    "find_work_habits",
    "identify_breaks",
    "identify_context_switches",
    "mine_time_patterns",
]

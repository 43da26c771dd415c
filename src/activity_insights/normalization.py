"""Utilities to normalize application names and window titles."""

from __future__ import annotations

import re
from typing import Optional

from .models import UNKNOWN_APP

_BROWSER_SUFFIXES: dict[str, tuple[str, ...]] = {
    "msedge": (" - Microsoft Edge",),
    "microsoft edge": (" - Microsoft Edge",),
    "chrome": (" - Google Chrome",),
    "google chrome": (" - Google Chrome",),
    "firefox": (" - Mozilla Firefox", " — Mozilla Firefox"),
    "brave": (" - Brave",),
    "brave browser": (" - Brave",),
    "opera": (" - Opera",),
    "safari": (),
}

_URL_PATTERN = re.compile(r"https?://[^\s]+")
_EXTRA_TAB_COUNT_PATTERN = re.compile(r"\s+and\s+\d+\s+more\s+pages?", re.IGNORECASE)


def normalize_app_name(app_name: Optional[str]) -> str:
    """Trim the application name, falling back to ``Unknown``."""
    if not app_name:
        return UNKNOWN_APP
    return app_name.strip() or UNKNOWN_APP


def is_browser(app_name: Optional[str]) -> bool:
    return _browser_key(app_name) is not None


def normalize_window_title(app_name: Optional[str], window_title: Optional[str]) -> str:
    """Remove common browser suffixes to surface tab names."""
    if not window_title:
        return ""
    normalized = window_title.strip()
    key = _browser_key(app_name)
    if key is not None:
        for suffix in _BROWSER_SUFFIXES[key]:
            if normalized.endswith(suffix):
                normalized = normalized[: -len(suffix)].rstrip(" -")
                break
        normalized = _strip_tab_count(normalized)

    return re.sub(r"\s{2,}", " ", normalized).strip()


def extract_url(app_name: Optional[str], window_title: Optional[str]) -> Optional[str]:
    """Return the first URL shown in a browser window title, if any."""
    if not window_title or not is_browser(app_name):
        return None
    match = _URL_PATTERN.search(window_title)
    return match.group(0) if match else None


def _browser_key(app_name: Optional[str]) -> Optional[str]:
    if not app_name:
        return None
    lowered = app_name.strip().lower()
    if lowered.endswith(".exe"):
        lowered = lowered[: -len(".exe")]
    if lowered in _BROWSER_SUFFIXES:
        return lowered
    return None


def _strip_tab_count(value: str) -> str:
    cleaned = _EXTRA_TAB_COUNT_PATTERN.sub("", value)
    return cleaned.strip(" -|")

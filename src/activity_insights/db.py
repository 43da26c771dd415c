"""SQLite database layer for activity records."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .models import ActivityRecord

_RECORD_COLUMNS = (
    "timestamp",
    "app_name",
    "window_title",
    "duration",
    "focus_score",
    "cpu_usage",
    "keystrokes",
    "mouse_clicks",
    "is_idle",
    "url",
)


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS activity_records (
            id INTEGER PRIMARY KEY,
            timestamp INTEGER NOT NULL,
            app_name TEXT NOT NULL,
            window_title TEXT NOT NULL DEFAULT '',
            duration INTEGER NOT NULL DEFAULT 0,
            focus_score REAL,
            cpu_usage REAL NOT NULL DEFAULT 0,
            keystrokes INTEGER NOT NULL DEFAULT 0,
            mouse_clicks INTEGER NOT NULL DEFAULT 0,
            is_idle INTEGER NOT NULL DEFAULT 0,
            url TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_records_timestamp
            ON activity_records(timestamp);
        CREATE INDEX IF NOT EXISTS idx_records_app_name
            ON activity_records(app_name);
        """
    )


def insert_records(conn: sqlite3.Connection, records: Iterable[ActivityRecord]) -> int:
    rows = [
        (
            record.timestamp,
            record.app_name,
            record.window_title,
            record.duration,
            record.focus_score,
            record.cpu_usage,
            record.keystrokes,
            record.mouse_clicks,
            1 if record.is_idle else 0,
            record.url,
        )
        for record in records
    ]
    placeholders = ", ".join("?" for _ in _RECORD_COLUMNS)
    conn.executemany(
        f"INSERT INTO activity_records ({', '.join(_RECORD_COLUMNS)}) "
        f"VALUES ({placeholders})",
        rows,
    )
    return len(rows)


def fetch_records(
    conn: sqlite3.Connection,
    start_ms: Optional[int] = None,
    end_ms: Optional[int] = None,
    *,
    app_name: Optional[str] = None,
    hide_idle: bool = False,
    limit: Optional[int] = None,
) -> list[ActivityRecord]:
    """Return records with ``start_ms <= timestamp < end_ms`` in ascending order.

    ``limit`` keeps the most recent records, still returned oldest first.
    """
    conditions: list[str] = []
    params: list[object] = []
    if start_ms is not None:
        conditions.append("timestamp >= ?")
        params.append(start_ms)
    if end_ms is not None:
        conditions.append("timestamp < ?")
        params.append(end_ms)
    if app_name:
        conditions.append("app_name = ?")
        params.append(app_name)
    if hide_idle:
        conditions.append("is_idle = 0")

    query = f"SELECT {', '.join(_RECORD_COLUMNS)} FROM activity_records"
    if conditions:
        query += " WHERE " + " AND ".join(conditions)
    query += " ORDER BY timestamp DESC, id DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    rows = list(conn.execute(query, params))
    rows.reverse()
    return [_row_to_record(row) for row in rows]


def count_records(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) AS total FROM activity_records").fetchone()
    return int(row["total"])


def delete_records_before(conn: sqlite3.Connection, cutoff_ms: int) -> int:
    """Drop records that started before ``cutoff_ms``; return how many."""
    cur = conn.execute("DELETE FROM activity_records WHERE timestamp < ?", (cutoff_ms,))
    return cur.rowcount


def _row_to_record(row: sqlite3.Row) -> ActivityRecord:
    return ActivityRecord(
        timestamp=row["timestamp"],
        app_name=row["app_name"],
        window_title=row["window_title"],
        duration=row["duration"],
        focus_score=row["focus_score"],
        cpu_usage=row["cpu_usage"],
        keystrokes=row["keystrokes"],
        mouse_clicks=row["mouse_clicks"],
        is_idle=bool(row["is_idle"]),
        url=row["url"],
    )

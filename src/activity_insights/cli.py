"""Command-line interface for activity insights."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import typer

from .config import AnalysisSettings, SegmenterSettings
from .paths import get_db_path, get_log_path

app = typer.Typer(help="Behavioral insights from desktop activity history.")

logger = logging.getLogger(__name__)


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_to_file: bool = typer.Option(
        False, "--log-file", help="Also write logs to the data directory."
    ),
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to_file:
        handlers.append(logging.FileHandler(get_log_path(), encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
    )


@app.command()
def ingest(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON array of raw observations (timestamp, app_name, window_title, ...).",
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the activity SQLite database.",
    ),
    tick_ms: int = typer.Option(
        1000, "--tick-ms", min=1, help="Sampling interval of the observations."
    ),
) -> None:
    """Segment raw observations into activity records and store them."""
    from .db import database_connection, insert_records
    from .models import Observation
    from .segmenter import segment

    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
        observations = sorted(
            (Observation(**item) for item in payload), key=lambda obs: obs.timestamp
        )
    except (ValueError, TypeError) as exc:
        raise typer.BadParameter(f"Could not read observations: {exc}") from exc

    records = segment(observations, SegmenterSettings(tick_ms=tick_ms))
    with database_connection(db_path or get_db_path()) as conn:
        inserted = insert_records(conn, records)
    logger.info(
        "Stored %d records from %d observations.", inserted, len(observations)
    )


@app.command()
def analyze(
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the activity SQLite database.",
    ),
    since: Optional[str] = typer.Option(
        None, "--since", help="First day (YYYY-MM-DD) to include."
    ),
    until: Optional[str] = typer.Option(
        None, "--until", help="Last day (YYYY-MM-DD) to include."
    ),
    utc: bool = typer.Option(
        False, "--utc", help="Derive hours and days in UTC instead of local time."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", min=1, help="Only analyze the most recent N records."
    ),
    break_minutes: float = typer.Option(
        5.0, "--break-minutes", min=0.1, help="Shortest gap counted as a break."
    ),
) -> None:
    """Print work patterns, habits, cycles and switching behavior."""
    from .db import database_connection, fetch_records
    from .engine import PatternAnalyzer
    from .reporting import PatternReportPrinter

    tz = timezone.utc if utc else None
    start_ms = _day_start_ms(since, tz) if since else None
    end_ms = _day_start_ms(until, tz, offset_days=1) if until else None
    if start_ms is not None and end_ms is not None and end_ms <= start_ms:
        raise typer.BadParameter("--until must be on or after --since")

    with database_connection(db_path or get_db_path()) as conn:
        records = fetch_records(conn, start_ms, end_ms, limit=limit)

    settings = AnalysisSettings.from_minutes(break_minutes=break_minutes, timezone=tz)
    analyzer = PatternAnalyzer(settings)
    report = analyzer.analyze_all(records)
    PatternReportPrinter(echo=typer.echo, tz=tz).print_report(report, len(records))


@app.command()
def prune(
    older_than_days: int = typer.Option(
        ..., "--older-than-days", min=1, help="Delete records older than this many days."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the activity SQLite database."
    ),
) -> None:
    """Remove old activity records from the database."""
    from .analysis.common import now_ms
    from .db import database_connection, delete_records_before

    cutoff_ms = now_ms() - older_than_days * 24 * 60 * 60 * 1000
    with database_connection(db_path or get_db_path()) as conn:
        removed = delete_records_before(conn, cutoff_ms)
    logger.info("Removed %d records older than %d days.", removed, older_than_days)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the activity SQLite database."
    ),
    open_browser: bool = typer.Option(
        False,
        "--open-browser/--no-open-browser",
        help="Open the interactive API docs in your default browser.",
    ),
) -> None:
    """Serve the insights JSON API."""
    import threading
    import webbrowser

    import uvicorn

    from .webapp import create_app

    api = create_app(db_path=db_path or get_db_path(), settings=AnalysisSettings())
    if open_browser:
        url = f"http://{host}:{port}/docs"
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()
    uvicorn.run(api, host=host, port=port, log_level="info")


def _day_start_ms(value: str, tz: Optional[timezone], offset_days: int = 0) -> int:
    try:
        day = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date: {value}") from exc
    if tz is not None:
        day = day.replace(tzinfo=tz)
    return int((day + timedelta(days=offset_days)).timestamp() * 1000)


if __name__ == "__main__":
    app()

"""FastAPI application that exposes activity insights as a local JSON API."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .config import AnalysisSettings
from .db import count_records, database_connection, fetch_records, insert_records
from .engine import PatternAnalyzer
from .models import ActivityRecord
from .normalization import normalize_app_name
from .paths import get_db_path

logger = logging.getLogger(__name__)

DATE_FMT = "%Y-%m-%d"


class RecordPayload(BaseModel):
    timestamp: int = Field(ge=0)
    app_name: str = Field(min_length=1)
    window_title: str = ""
    duration: int = Field(ge=0)
    focus_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    cpu_usage: Optional[float] = Field(default=None, ge=0.0)
    keystrokes: Optional[int] = Field(default=None, ge=0)
    mouse_clicks: Optional[int] = Field(default=None, ge=0)
    is_idle: bool = False
    url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    def to_record(self) -> ActivityRecord:
        data = self.model_dump()
        data["app_name"] = normalize_app_name(self.app_name)
        return ActivityRecord(**data)


class RecordBatch(BaseModel):
    records: List[RecordPayload]

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[AnalysisSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or AnalysisSettings()
    analyzer = PatternAnalyzer(resolved_settings)

    app = FastAPI(title="Activity Insights", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.analyzer = analyzer

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        logger.info("Serving insights from %s", resolved_db_path)

    def _load(request: Request, start: Optional[str], end: Optional[str]) -> list[ActivityRecord]:
        start_ms, end_ms = _parse_range(start, end, resolved_settings.timezone)
        with database_connection(request.app.state.db_path) as conn:
            return fetch_records(conn, start_ms, end_ms)

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            total = count_records(conn)
        return {
            "database_path": str(request.app.state.db_path),
            "record_count": total,
            "min_confidence": resolved_settings.min_confidence_threshold,
            "break_threshold_ms": resolved_settings.break_threshold,
        }

    @app.post("/api/records", status_code=201)
    def add_records(payload: RecordBatch, request: Request) -> Dict[str, Any]:
        records = sorted(
            (item.to_record() for item in payload.records),
            key=lambda record: record.timestamp,
        )
        with database_connection(request.app.state.db_path) as conn:
            inserted = insert_records(conn, records)
        logger.debug("Stored %d records via API.", inserted)
        return {"inserted": inserted}

    @app.get("/api/patterns")
    def patterns(
        request: Request,
        start: Optional[str] = Query(default=None, description="Start date YYYY-MM-DD."),
        end: Optional[str] = Query(default=None, description="End date YYYY-MM-DD."),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.identify_recurring_work_patterns(records)
        return {"patterns": [item.to_dict() for item in found]}

    @app.get("/api/focus-blocks")
    def focus_blocks(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.detect_focus_blocks(records)
        return {"focus_blocks": [item.to_dict() for item in found]}

    @app.get("/api/breaks")
    def breaks(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.analyze_break_patterns(records)
        return {"break_patterns": [item.to_dict() for item in found]}

    @app.get("/api/habits")
    def habits(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.find_work_habits(records)
        return {"habits": [item.to_dict() for item in found]}

    @app.get("/api/cycles")
    def cycles(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.detect_productivity_cycles(records)
        return {"cycles": [item.to_dict() for item in found]}

    @app.get("/api/context-switches")
    def context_switches(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        found = request.app.state.analyzer.analyze_context_switching_patterns(records)
        return {"context_switches": [item.to_dict() for item in found]}

    @app.get("/api/report")
    def report(
        request: Request,
        start: Optional[str] = Query(default=None),
        end: Optional[str] = Query(default=None),
    ) -> Dict[str, Any]:
        records = _load(request, start, end)
        payload = request.app.state.analyzer.analyze_all(records).to_dict()
        payload["record_count"] = len(records)
        return payload

    return app


def _parse_range(
    start: Optional[str], end: Optional[str], tz: Optional[tzinfo]
) -> tuple[Optional[int], Optional[int]]:
    """Translate inclusive dates into a half-open millisecond range."""
    start_day = _parse_date(start, tz) if start else None
    end_day = _parse_date(end, tz) if end else None
    if start_day and end_day and end_day < start_day:
        raise HTTPException(
            status_code=400, detail="end date must be on or after start date"
        )
    start_ms = _to_ms(start_day) if start_day else None
    end_ms = _to_ms(end_day + timedelta(days=1)) if end_day else None
    return start_ms, end_ms


def _parse_date(value: str, tz: Optional[tzinfo]) -> datetime:
    try:
        parsed = datetime.strptime(value, DATE_FMT)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc
    return parsed.replace(tzinfo=tz) if tz is not None else parsed


def _to_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)

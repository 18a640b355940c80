from __future__ import annotations

import math
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from core import (
    DAY_NAMES,
    FastingError,
    SetCountResult,
    Tracker,
    configure_logging,
    fasting_stats,
    load_settings,
    open_tracker,
    workspace_root,
)

configure_logging(load_settings().log_level)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="RepRing", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("REPRING_USERNAME", "")
    expected_password = os.environ.get("REPRING_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Tracker per request ───────────────────────────────────────

def _tracker(day: str | None = None) -> Tracker:
    """Open the workspace tracker with the given date selected."""
    tracker = open_tracker(workspace_root())
    if day:
        try:
            tracker.select_date(day)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return tracker


def _reps_response(tracker: Tracker, result: SetCountResult | None) -> dict[str, Any]:
    return {
        "ok": True,
        "applied": result is not None,
        "goalReached": result is SetCountResult.GOAL_REACHED,
        "summary": tracker.summary(),
    }


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    tracker = _tracker()
    s = tracker.summary()
    f = tracker.fasting_summary()

    header = "".join(f"<th>{d}</th>" for d in DAY_NAMES)
    rows, row = [], []
    for cell in tracker.calendar():
        if cell.is_blank:
            row.append("<td></td>")
        else:
            classes = " ".join(c for c in (
                cell.status,
                "selected" if cell.is_selected else "",
                "today" if cell.is_today else "",
            ) if c)
            row.append(f'<td class="{classes}" title="{cell.date} • {cell.count} reps">{cell.day}</td>')
        if len(row) == 7:
            rows.append("<tr>" + "".join(row) + "</tr>")
            row = []
    if row:
        rows.append("<tr>" + "".join(row) + "</tr>")

    history = "".join(
        f"<li>{_escape(h['startTime'])} — {_escape(h['label'])}</li>" for h in f["history"]
    )

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>RepRing</title>
</head>
<body>
  <h1>RepRing</h1>
  <p>\U0001f525 <b>{s['streak']}</b> day streak · {s['total']:,} total</p>
  <h2>{s['count']} / {s['goal']}</h2>
  <p>{_escape(s['message'])}</p>
  <h3>{_escape(tracker.calendar_label())}</h3>
  <table>
    <tr>{header}</tr>
    {''.join(rows)}
  </table>
  <h2>{_escape(f['status'])}</h2>
  <p>{_escape(f['elapsed'] or '')}</p>
  <ul>{history}</ul>
</body>
</html>"""
    return HTMLResponse(html)


@app.get("/api/summary")
def api_summary(date: str | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Progress, streak and total for a date (today by default)."""
    return _tracker(date).summary()


@app.post("/api/reps/add")
def api_add_reps(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Quick-add a positive amount of reps."""
    tracker = _tracker(payload.get("date"))
    amount = payload.get("amount")
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or (isinstance(amount, float) and not math.isfinite(amount))
        or amount <= 0
    ):
        raise HTTPException(status_code=400, detail="amount must be a positive number")
    return _reps_response(tracker, tracker.add(amount))


@app.post("/api/reps/custom")
def api_custom_reps(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Add a typed amount; blank, non-numeric or <= 0 input is ignored."""
    tracker = _tracker(payload.get("date"))
    return _reps_response(tracker, tracker.add_custom(payload.get("amount")))


@app.post("/api/reps/undo")
def api_undo_reps(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    tracker = _tracker(payload.get("date"))
    return _reps_response(tracker, tracker.undo())


@app.put("/api/reps/{day}")
def api_set_reps(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Overwrite the count for a day."""
    tracker = _tracker(day)
    return _reps_response(tracker, tracker.set_selected_count(payload.get("count", 0)))


@app.get("/api/calendar")
def api_calendar(
    year: int | None = None,
    month: int | None = None,
    selected: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Month grid with per-day status."""
    tracker = _tracker(selected)
    if year is not None or month is not None:
        if year is None or month is None or not 1 <= month <= 12 or not 1 <= year <= 9999:
            raise HTTPException(status_code=400, detail="year and month must be given together")
        tracker.view_year, tracker.view_month = year, month
    return {
        "year": tracker.view_year,
        "month": tracker.view_month,
        "label": tracker.calendar_label(),
        "dayNames": DAY_NAMES,
        "cells": [c.to_dict() for c in tracker.calendar()],
    }


@app.get("/api/fast")
def api_fast_current(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _tracker().fasting_summary()


@app.post("/api/fast/start")
def api_fast_start(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Start a fast now, or at a past start_time."""
    tracker = _tracker()
    if tracker.fasting.is_fasting:
        raise HTTPException(status_code=409, detail="A fast is already active. End it first.")
    try:
        if payload.get("start_time"):
            tracker.start_fast_from_input(str(payload["start_time"]))
        else:
            tracker.start_fast()
    except FastingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "fast": tracker.fasting_summary()}


@app.post("/api/fast/end")
def api_fast_end(username: str = Depends(get_current_user)) -> dict[str, Any]:
    tracker = _tracker()
    record = tracker.end_fast()
    return {
        "ok": True,
        "record": record.to_dict() if record else None,
        "fast": tracker.fasting_summary(),
    }


@app.get("/api/fast/stats")
def api_fast_stats(days: int = 7, username: str = Depends(get_current_user)) -> dict[str, Any]:
    tracker = _tracker()
    return fasting_stats(tracker.fasting, tracker.now(), days, tracker.settings.fast_goal_hours)

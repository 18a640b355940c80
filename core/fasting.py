"""Intermittent-fasting session tracking for RepRing.

A single active fast plus a bounded, newest-first history of completed fasts.
Every fast ends by moving from the active register into history; there is no
way to discard one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from core.models import HISTORY_LIMIT, ActiveFast, FastRecord, FastState, parse_timestamp
from core.store import FASTING_KEY, KeyValueStore
from core.workspace import as_local

logger = logging.getLogger(__name__)

DEFAULT_GOAL_HOURS = 16
FUTURE_START_MESSAGE = "Start time cannot be in the future"


class FastingError(ValueError):
    """A fasting transition was rejected; state is unchanged."""


def start_fast(
    state: FastState,
    start_time: datetime,
    now: datetime,
    replace: bool = False,
) -> ActiveFast:
    """Begin a fast at start_time (now or backdated).

    Raises FastingError if start_time is after now, or if a fast is already
    active and replace is False.
    """
    now = as_local(now)
    start_time = as_local(start_time, now.tzinfo)
    if start_time > now:
        raise FastingError(FUTURE_START_MESSAGE)
    if state.active_fast is not None and not replace:
        raise FastingError("A fast is already active. End it first.")

    state.active_fast = ActiveFast(start_time=start_time)
    logger.info("Fast started at %s", start_time.isoformat(timespec="seconds"))
    return state.active_fast


def end_fast(state: FastState, now: datetime) -> FastRecord | None:
    """End the active fast and prepend it to history. No-op when idle."""
    if state.active_fast is None:
        return None

    start = state.active_fast.start_time
    end = as_local(now)
    duration_ms = max(0, int((end - start).total_seconds() * 1000))
    record = FastRecord(start_time=start, end_time=end, duration_ms=duration_ms)

    state.history = [record, *state.history][:HISTORY_LIMIT]
    state.active_fast = None
    logger.info("Fast ended after %s", format_duration_short(duration_ms))
    return record


def elapsed(state: FastState, now: datetime) -> timedelta | None:
    """Time since the active fast started, or None when idle."""
    if state.active_fast is None:
        return None
    return as_local(now) - state.active_fast.start_time


def progress_fraction(elapsed_time: timedelta | None, goal_hours: float = DEFAULT_GOAL_HOURS) -> float:
    """Fraction of the fasting goal completed, clamped to [0, 1]."""
    if elapsed_time is None:
        return 0.0
    goal_seconds = goal_hours * 3600
    if goal_seconds <= 0:
        return 1.0
    return min(max(elapsed_time.total_seconds() / goal_seconds, 0.0), 1.0)


def recent_history(state: FastState, n: int = 5) -> list[FastRecord]:
    return state.history[: max(0, n)]


def parse_start_input(value: str | None, now: datetime) -> datetime:
    """Parse a user-entered start time such as '2024-01-02T20:30'.

    Raises FastingError for blank, unparseable or future values.
    """
    now = as_local(now)
    start = parse_timestamp(value, now.tzinfo)
    if start is None:
        raise FastingError(f"Could not parse start time {value!r}")
    if start > now:
        raise FastingError(FUTURE_START_MESSAGE)
    return start


# ── Formatting ────────────────────────────────────────────────


def format_elapsed(ms: float) -> str:
    """H:MM:SS with unbounded hours."""
    total_seconds = max(0, int(ms // 1000))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def format_duration_short(ms: float) -> str:
    """'45m' or '16h 5m'."""
    total_minutes = max(0, int(ms // 60000))
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


# ── Stats ─────────────────────────────────────────────────────


def fasting_stats(
    state: FastState,
    now: datetime,
    days: int = 7,
    goal_hours: float = DEFAULT_GOAL_HOURS,
) -> dict[str, Any]:
    """Statistics for fasts started within the last N days."""
    cutoff = as_local(now) - timedelta(days=days)
    recent = [r for r in state.history if r.start_time >= cutoff]

    if not recent:
        return {
            "total_fasts": 0,
            "total_hours": 0,
            "avg_hours": 0,
            "longest_hours": 0,
            "goal_rate": 0,
        }

    hours = [r.duration_ms / 3_600_000 for r in recent]
    reached = sum(1 for h in hours if h >= goal_hours)
    return {
        "total_fasts": len(recent),
        "total_hours": round(sum(hours), 1),
        "avg_hours": round(sum(hours) / len(recent), 1),
        "longest_hours": round(max(hours), 1),
        "goal_rate": round(reached / len(recent), 3),
    }


# ── Persistence ───────────────────────────────────────────────


def load_fast_state(store: KeyValueStore) -> FastState:
    raw = store.get(FASTING_KEY)
    if raw is not None and not isinstance(raw, dict):
        logger.warning("Ignoring malformed fasting document (%s)", type(raw).__name__)
    return FastState.from_dict(raw)


def save_fast_state(state: FastState, store: KeyValueStore) -> None:
    store.set(FASTING_KEY, state.to_dict())

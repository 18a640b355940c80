"""Typed dataclasses for the RepRing data model.

Persisted models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Malformed entries are dropped; missing keys use defaults.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any

from core.workspace import as_local

GOAL = 100
HISTORY_LIMIT = 20


def parse_timestamp(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as wall clock in tz."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return as_local(datetime.fromisoformat(value.strip()), tz)
    except ValueError:
        return None


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


# ── Daily log ─────────────────────────────────────────────────


class SetCountResult(enum.Enum):
    """Outcome of a ledger mutation."""

    UPDATED = "updated"
    GOAL_REACHED = "goal_reached"


@dataclass
class Ledger:
    """Repetition counts keyed by ISO date. Zero counts are never stored."""

    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Any) -> Ledger:
        if not d or not isinstance(d, dict):
            return cls()
        counts: dict[str, int] = {}
        for day, value in d.items():
            if not is_iso_date(day):
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if not math.isfinite(value):
                continue
            count = math.floor(value)
            if count > 0:
                counts[day] = count
        return cls(counts=counts)

    def to_dict(self) -> dict[str, int]:
        return dict(sorted(self.counts.items()))


# ── Fasting ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ActiveFast:
    start_time: datetime

    @classmethod
    def from_dict(cls, d: Any) -> ActiveFast | None:
        if not isinstance(d, dict):
            return None
        start = parse_timestamp(d.get("startTime", d.get("start_time")))
        if start is None:
            return None
        return cls(start_time=start)

    def to_dict(self) -> dict[str, Any]:
        return {"startTime": self.start_time.isoformat()}


@dataclass(frozen=True)
class FastRecord:
    start_time: datetime
    end_time: datetime
    duration_ms: int

    @classmethod
    def from_dict(cls, d: Any) -> FastRecord | None:
        if not isinstance(d, dict):
            return None
        start = parse_timestamp(d.get("startTime"))
        end = parse_timestamp(d.get("endTime"))
        if start is None or end is None:
            return None
        duration = d.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)) or not math.isfinite(duration):
            duration = (end - start).total_seconds() * 1000
        return cls(start_time=start, end_time=end, duration_ms=max(0, int(duration)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "duration": self.duration_ms,
        }


@dataclass
class FastState:
    active_fast: ActiveFast | None = None
    history: list[FastRecord] = field(default_factory=list)  # newest first

    @property
    def is_fasting(self) -> bool:
        return self.active_fast is not None

    @classmethod
    def from_dict(cls, d: Any) -> FastState:
        if not d or not isinstance(d, dict):
            return cls()
        raw_history = d.get("history")
        if not isinstance(raw_history, list):
            raw_history = []
        records = [FastRecord.from_dict(r) for r in raw_history]
        return cls(
            active_fast=ActiveFast.from_dict(d.get("activeFast")),
            history=[r for r in records if r is not None][:HISTORY_LIMIT],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeFast": self.active_fast.to_dict() if self.active_fast else None,
            "history": [r.to_dict() for r in self.history],
        }


# ── Calendar ──────────────────────────────────────────────────


@dataclass(frozen=True)
class DayCell:
    day: int | None = None  # None for leading blanks
    date: str = ""
    count: int = 0
    status: str = "empty"  # empty, active, done
    is_selected: bool = False
    is_today: bool = False

    @property
    def is_blank(self) -> bool:
        return self.day is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "date": self.date or None,
            "count": self.count,
            "status": self.status,
            "isSelected": self.is_selected,
            "isToday": self.is_today,
        }

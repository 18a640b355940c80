"""Application context: owns the ledger, fasting state and view selection.

Each operation mutates in-memory state through the ledger/fasting functions,
then saves explicitly and fires lifecycle hooks. Front-ends (TUI, API) talk
only to a Tracker.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

from core import fasting as fasting_ops
from core import ledger as ledger_ops
from core.calendar_view import build_month, month_label, shift_month
from core.hooks import run_hooks
from core.models import GOAL, ActiveFast, DayCell, FastRecord, FastState, Ledger, SetCountResult, is_iso_date
from core.settings import Settings, load_settings
from core.store import KeyValueStore, open_store
from core.workspace import workspace_root

logger = logging.getLogger(__name__)

UNDO_STEP = 10
QUICK_ADD_AMOUNTS = (10, 20, 25, 50)


def parse_amount(raw: Any) -> float | None:
    """Parse a custom-add amount; None for blank, non-numeric or <= 0."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


@dataclass
class Tracker:
    store: KeyValueStore
    ledger: Ledger
    fasting: FastState
    clock: Callable[[], datetime]
    settings: Settings
    selected_date: str
    view_year: int
    view_month: int
    root: Path | None = None  # hooks only run when a workspace root is set

    # ── Clock ──────────────────────────────────────────────────

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> str:
        return self.clock().date().isoformat()

    def is_future(self, day: str) -> bool:
        return day > self.today()

    # ── Daily log ──────────────────────────────────────────────

    def _apply(self, mutate: Callable[[], SetCountResult]) -> SetCountResult | None:
        if self.is_future(self.selected_date):
            logger.debug("Ignoring change to future date %s", self.selected_date)
            return None
        result = mutate()
        ledger_ops.save_ledger(self.ledger, self.store)
        if result is SetCountResult.GOAL_REACHED:
            self._fire("on_goal_reached", {
                "date": self.selected_date,
                "count": ledger_ops.get_count(self.ledger, self.selected_date),
                "goal": GOAL,
                "streak": ledger_ops.streak(self.ledger, self.today()),
            })
        return result

    def add(self, amount: Any) -> SetCountResult | None:
        """Add reps to the selected date."""
        return self._apply(
            lambda: ledger_ops.add_count(self.ledger, self.selected_date, amount, self.selected_date)
        )

    def add_custom(self, raw: Any) -> SetCountResult | None:
        """Add a user-typed amount; blank, non-numeric and <= 0 are ignored."""
        amount = parse_amount(raw)
        if amount is None:
            return None
        return self.add(amount)

    def undo(self) -> SetCountResult | None:
        return self.add(-UNDO_STEP)

    def set_selected_count(self, value: Any) -> SetCountResult | None:
        return self._apply(
            lambda: ledger_ops.set_count(self.ledger, self.selected_date, value, self.selected_date)
        )

    # ── Selection & navigation ─────────────────────────────────

    def select_date(self, day: str) -> None:
        if not is_iso_date(day):
            raise ValueError(f"Invalid date: {day!r}")
        self.selected_date = day

    def return_to_today(self) -> None:
        today = date.fromisoformat(self.today())
        self.selected_date = today.isoformat()
        self.view_year, self.view_month = today.year, today.month

    def shift_month(self, delta: int) -> None:
        self.view_year, self.view_month = shift_month(self.view_year, self.view_month, delta)

    # ── Fasting ────────────────────────────────────────────────

    def start_fast(self, start_time: datetime | None = None, replace: bool = False) -> ActiveFast:
        now = self.now()
        active = fasting_ops.start_fast(self.fasting, start_time or now, now, replace=replace)
        fasting_ops.save_fast_state(self.fasting, self.store)
        self._fire("on_fast_start", {"startTime": active.start_time.isoformat()})
        return active

    def start_fast_from_input(self, raw: str | None) -> ActiveFast:
        """Start a backdated fast from a typed timestamp."""
        start = fasting_ops.parse_start_input(raw, self.now())
        return self.start_fast(start)

    def end_fast(self) -> FastRecord | None:
        record = fasting_ops.end_fast(self.fasting, self.now())
        if record is None:
            return None
        fasting_ops.save_fast_state(self.fasting, self.store)
        self._fire("on_fast_end", record.to_dict())
        return record

    # ── Views ──────────────────────────────────────────────────

    def summary(self) -> dict[str, Any]:
        """Progress panel for the selected date."""
        today = self.today()
        day = self.selected_date
        count = ledger_ops.get_count(self.ledger, day)
        is_future = self.is_future(day)

        if is_future:
            message = "Future date"
        elif count >= GOAL:
            message = "Goal complete!"
        else:
            message = f"{GOAL - count} more to go"

        return {
            "date": day,
            "today": today,
            "isToday": day == today,
            "isFuture": is_future,
            "count": count,
            "goal": GOAL,
            "progress": ledger_ops.progress_fraction(count),
            "message": message,
            "streak": ledger_ops.streak(self.ledger, today),
            "total": ledger_ops.total(self.ledger),
            "controlsEnabled": not is_future,
            "undoEnabled": not is_future and count > 0,
        }

    def calendar(self) -> list[DayCell]:
        return build_month(self.view_year, self.view_month, self.ledger, self.selected_date, self.today())

    def calendar_label(self) -> str:
        return month_label(self.view_year, self.view_month)

    def fasting_summary(self) -> dict[str, Any]:
        now = self.now()
        goal_hours = self.settings.fast_goal_hours
        spent = fasting_ops.elapsed(self.fasting, now)
        active = self.fasting.active_fast
        history = fasting_ops.recent_history(self.fasting, self.settings.history_display)
        progress = fasting_ops.progress_fraction(spent, goal_hours)
        return {
            "fasting": active is not None,
            "status": "Fasting" if active else "No active fast",
            "startTime": active.start_time.isoformat() if active else None,
            "elapsedMs": int(spent.total_seconds() * 1000) if spent is not None else None,
            "elapsed": fasting_ops.format_elapsed(spent.total_seconds() * 1000) if spent is not None else None,
            "progress": progress,
            "goalHours": goal_hours,
            "goalMet": progress >= 1.0,
            "history": [
                {**r.to_dict(), "label": fasting_ops.format_duration_short(r.duration_ms)}
                for r in history
            ],
            "historyCount": len(self.fasting.history),
        }

    # ── Hooks ──────────────────────────────────────────────────

    def _fire(self, hook_point: str, context: dict[str, Any]) -> None:
        if self.root is None:
            return
        run_hooks(hook_point, context, self.root)


def open_tracker(
    root: Path | None = None,
    store: KeyValueStore | None = None,
    clock: Callable[[], datetime] | None = None,
    settings: Settings | None = None,
) -> Tracker:
    """Load persisted state into a Tracker positioned on today."""
    if root is None and store is None:
        root = workspace_root()
    if store is None:
        store = open_store(root)
    if settings is None:
        settings = load_settings(root) if root is not None else Settings()
    if clock is None:
        zone = settings.zone()
        clock = lambda: datetime.now(zone)  # noqa: E731

    today = clock().date()
    return Tracker(
        store=store,
        ledger=ledger_ops.load_ledger(store),
        fasting=fasting_ops.load_fast_state(store),
        clock=clock,
        settings=settings,
        selected_date=today.isoformat(),
        view_year=today.year,
        view_month=today.month,
        root=root,
    )

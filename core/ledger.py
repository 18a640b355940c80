"""Daily repetition ledger: per-day counts, goal crossing, streak and total."""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Any

from core.models import GOAL, Ledger, SetCountResult
from core.store import LEDGER_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def clamp_count(value: Any) -> int:
    """Coerce any input to a storable count: floored, never negative.

    Non-numeric and non-finite values become 0.
    """
    if isinstance(value, int):
        return max(0, int(value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.floor(number))


def get_count(ledger: Ledger, day: str) -> int:
    return ledger.counts.get(day, 0)


def set_count(
    ledger: Ledger,
    day: str,
    value: Any,
    selected_date: str | None = None,
) -> SetCountResult:
    """Store the clamped count for a day.

    Returns GOAL_REACHED when the day moves from below the goal to at or above
    it and is the selected date (any date when selected_date is None).
    """
    previous = get_count(ledger, day)
    safe = clamp_count(value)
    if safe == 0:
        ledger.counts.pop(day, None)
    else:
        ledger.counts[day] = safe

    if previous < GOAL <= safe and (selected_date is None or day == selected_date):
        logger.info("Goal reached for %s (%d reps)", day, safe)
        return SetCountResult.GOAL_REACHED
    return SetCountResult.UPDATED


def add_count(
    ledger: Ledger,
    day: str,
    delta: Any,
    selected_date: str | None = None,
) -> SetCountResult:
    """Add delta (possibly negative) to a day's count, never going below 0.

    Non-numeric and non-finite deltas leave the count unchanged.
    """
    current = get_count(ledger, day)
    amount: int | float
    if isinstance(delta, int):
        amount = int(delta)
    else:
        try:
            amount = float(delta)
        except (TypeError, ValueError):
            amount = 0
        if not math.isfinite(amount):
            amount = 0
    return set_count(ledger, day, current + amount, selected_date)


def qualifies(ledger: Ledger, day: str) -> bool:
    return get_count(ledger, day) >= GOAL


def streak(ledger: Ledger, today: str) -> int:
    """Count consecutive goal days ending at or before today.

    Today adds one if it meets the goal. Either way the walk continues with
    yesterday and stops at the first day below the goal.
    """
    current = date.fromisoformat(today)
    count = 1 if qualifies(ledger, current.isoformat()) else 0
    check = current - timedelta(days=1)
    while qualifies(ledger, check.isoformat()):
        count += 1
        check -= timedelta(days=1)
    return count


def total(ledger: Ledger) -> int:
    return sum(ledger.counts.values())


def progress_fraction(count: int, goal: int = GOAL) -> float:
    """Fraction of the daily goal completed, capped at 1."""
    if goal <= 0:
        return 1.0
    return min(max(count, 0) / goal, 1.0)


def load_ledger(store: KeyValueStore) -> Ledger:
    raw = store.get(LEDGER_KEY)
    if raw is not None and not isinstance(raw, dict):
        logger.warning("Ignoring malformed ledger document (%s)", type(raw).__name__)
    return Ledger.from_dict(raw)


def save_ledger(ledger: Ledger, store: KeyValueStore) -> None:
    store.set(LEDGER_KEY, ledger.to_dict())

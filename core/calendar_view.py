"""Month grid for the calendar view. Pure functions, no stored state."""

from __future__ import annotations

import calendar
from datetime import date

from core.ledger import get_count
from core.models import GOAL, DayCell, Ledger

DAY_NAMES = ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]


def day_status(count: int) -> str:
    if count >= GOAL:
        return "done"
    if count > 0:
        return "active"
    return "empty"


def first_weekday_offset(year: int, month: int) -> int:
    """Weekday of the 1st with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def build_month(
    year: int,
    month: int,
    ledger: Ledger,
    selected_date: str | None,
    today: str | None,
) -> list[DayCell]:
    """Leading blank cells, then one annotated cell per day of the month."""
    cells = [DayCell() for _ in range(first_weekday_offset(year, month))]
    days_in_month = calendar.monthrange(year, month)[1]
    for day in range(1, days_in_month + 1):
        day_str = date(year, month, day).isoformat()
        count = get_count(ledger, day_str)
        cells.append(
            DayCell(
                day=day,
                date=day_str,
                count=count,
                status=day_status(count),
                is_selected=day_str == selected_date,
                is_today=day_str == today,
            )
        )
    return cells


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"

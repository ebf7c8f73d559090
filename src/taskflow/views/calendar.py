# src/taskflow/views/calendar.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from ..core.clock import local_now, parse_day
from ..tasks.task_models import Task

GRID_CELLS = 42  # 6 weeks x 7 days


@dataclass(slots=True)
class CalendarCell:
    day: date
    is_current_month: bool
    is_today: bool
    tasks: list[Task] = field(default_factory=list)


def grid_start(year: int, month: int) -> date:
    """Sunday on or before the first day of the month."""
    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def tasks_for_day(tasks: Iterable[Task], day: date) -> list[Task]:
    return [t for t in tasks if parse_day(t.due_date) == day]


def month_grid(
    tasks: Iterable[Task],
    year: int,
    month: int,
    *,
    today: date | None = None,
) -> list[CalendarCell]:
    today = today or local_now().date()
    start = grid_start(year, month)
    cells = [
        CalendarCell(
            day=start + timedelta(days=i),
            is_current_month=(start + timedelta(days=i)).month == month,
            is_today=start + timedelta(days=i) == today,
        )
        for i in range(GRID_CELLS)
    ]

    by_day = {c.day: c for c in cells}
    for t in tasks:
        due = parse_day(t.due_date)
        if due is not None and due in by_day:
            by_day[due].tasks.append(t)
    return cells


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months forward (negative: back), wrapping the year."""
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1

# src/taskflow/views/stats.py

"""
Derived numbers behind the dashboard and analytics screens.

All functions are pure, accept any iterable of tasks and never raise on
empty input: rates and shares fall back to 0.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..core.clock import local_day, local_now, parse_iso
from ..tasks.task_models import Task, TaskPriority, TaskStatus

RECENT_LIMIT = 5
WEEK_DAYS = 7


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    completed: int
    pending: int
    in_progress: int

    @property
    def completion_rate(self) -> int:
        return percent(self.completed, self.total)


@dataclass(frozen=True, slots=True)
class DailyCount:
    day: date
    completed: int


@dataclass(frozen=True, slots=True)
class Share:
    label: str
    count: int
    percent: int


def percent(part: int, total: int) -> int:
    """Integer percentage, rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(part / total * 100 + 0.5))


def task_counts(tasks: Iterable[Task]) -> TaskCounts:
    items = list(tasks)
    by_status = status_breakdown(items)
    return TaskCounts(
        total=len(items),
        completed=by_status[TaskStatus.COMPLETED.value],
        pending=by_status[TaskStatus.PENDING.value],
        in_progress=by_status[TaskStatus.IN_PROGRESS.value],
    )


def completion_rate(tasks: Iterable[Task]) -> int:
    return task_counts(tasks).completion_rate


def status_breakdown(tasks: Iterable[Task]) -> dict[str, int]:
    out = {s.value: 0 for s in TaskStatus}
    for t in tasks:
        out[t.status.value] += 1
    return out


def priority_breakdown(tasks: Iterable[Task]) -> dict[str, int]:
    # Display order: most urgent first.
    out = {p.value: 0 for p in (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)}
    for t in tasks:
        out[t.priority.value] += 1
    return out


def category_breakdown(tasks: Iterable[Task]) -> dict[str, int]:
    out: dict[str, int] = {}
    for t in tasks:
        out[t.category] = out.get(t.category, 0) + 1
    return out


def shares(breakdown: dict[str, int], total: int) -> list[Share]:
    return [Share(label=k, count=v, percent=percent(v, total)) for k, v in breakdown.items()]


def monthly_tasks(tasks: Iterable[Task], *, now: datetime | None = None) -> list[Task]:
    """Tasks created in the local calendar month of `now`."""
    now = (now or local_now()).astimezone()
    out: list[Task] = []
    for t in tasks:
        created = parse_iso(t.created_at)
        if created is None:
            continue
        created = created.astimezone()
        if created.year == now.year and created.month == now.month:
            out.append(t)
    return out


def weekly_productivity(tasks: Iterable[Task], *, today: date | None = None) -> list[DailyCount]:
    """Completed tasks per local day for the last 7 days (today included), oldest first."""
    today = today or local_now().date()
    days = [today - timedelta(days=i) for i in range(WEEK_DAYS - 1, -1, -1)]
    counts = {d: 0 for d in days}
    for t in tasks:
        if t.status != TaskStatus.COMPLETED:
            continue
        updated = parse_iso(t.updated_at)
        if updated is None:
            continue
        day = local_day(updated)
        if day in counts:
            counts[day] += 1
    return [DailyCount(day=d, completed=counts[d]) for d in days]


def recent_tasks(tasks: Iterable[Task], *, limit: int = RECENT_LIMIT) -> list[Task]:
    """Most recently updated first; input order is left alone."""
    def key(t: Task) -> float:
        updated = parse_iso(t.updated_at)
        return updated.timestamp() if updated is not None else float("-inf")

    return sorted(tasks, key=key, reverse=True)[: max(0, limit)]


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    counts: TaskCounts
    priorities: dict[str, int]
    recent: list[Task]


@dataclass(frozen=True, slots=True)
class AnalyticsSummary:
    counts: TaskCounts
    monthly_created: int
    statuses: list[Share]
    priorities: list[Share]
    categories: dict[str, int]
    week: list[DailyCount]


def dashboard_summary(tasks: Iterable[Task], *, recent_limit: int = RECENT_LIMIT) -> DashboardSummary:
    items = list(tasks)
    return DashboardSummary(
        counts=task_counts(items),
        priorities=priority_breakdown(items),
        recent=recent_tasks(items, limit=recent_limit),
    )


def analytics_summary(tasks: Iterable[Task], *, now: datetime | None = None) -> AnalyticsSummary:
    items = list(tasks)
    now = (now or local_now()).astimezone()
    counts = task_counts(items)
    return AnalyticsSummary(
        counts=counts,
        monthly_created=len(monthly_tasks(items, now=now)),
        statuses=shares(status_breakdown(items), counts.total),
        priorities=shares(priority_breakdown(items), counts.total),
        categories=category_breakdown(items),
        week=weekly_productivity(items, today=now.date()),
    )

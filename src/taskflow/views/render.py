# src/taskflow/views/render.py

"""Plain-text rendering of the screens (dashboard, task list, calendar, analytics)."""

from __future__ import annotations

import calendar as _calendar
from collections.abc import Sequence

from ..core.clock import parse_day, parse_iso
from ..tasks.task_models import Task, TaskFilter
from .calendar import CalendarCell
from .stats import AnalyticsSummary, DashboardSummary

BAR_WIDTH = 20
ID_WIDTH = 8

_STATUS_MARK = {"pending": "[ ]", "in-progress": "[~]", "completed": "[x]"}
_PRIORITY_MARK = {"high": "!!!", "medium": "!! ", "low": "!  "}


def _bar(percent: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * max(0, min(100, percent)) / 100)
    return "#" * filled + "." * (width - filled)


def _day(raw: str | None) -> str:
    d = parse_day(raw)
    return d.isoformat() if d else "-"


def task_line(task: Task) -> str:
    due = f" due {_day(task.due_date)}" if task.due_date else ""
    return (
        f"{task.id[:ID_WIDTH]} {_STATUS_MARK.get(task.status.value, '[?]')} "
        f"{_PRIORITY_MARK.get(task.priority.value, '   ')} {task.title} "
        f"({task.category}){due}"
    )


def task_detail(task: Task) -> str:
    lines = [
        f"Task {task.id}",
        f"  Title:    {task.title}",
        f"  Status:   {task.status.value}",
        f"  Priority: {task.priority.value}",
        f"  Category: {task.category}",
        f"  Due:      {_day(task.due_date)}",
        f"  Updated:  {_day(task.updated_at)}",
    ]
    if task.description:
        lines.append(f"  {task.description}")
    return "\n".join(lines)


def task_list(tasks: Sequence[Task], flt: TaskFilter, search: str = "") -> str:
    header = f"Tasks ({len(tasks)})"
    if not flt.is_default():
        header += f" [status={flt.status} priority={flt.priority} category={flt.category}]"
    if search:
        header += f" [search={search!r}]"
    if not tasks:
        return header + "\n  No tasks found. Try adjusting your filters or create a new task."
    return "\n".join([header, *("  " + task_line(t) for t in tasks)])


def dashboard(summary: DashboardSummary, user_name: str = "") -> str:
    c = summary.counts
    p = summary.priorities
    lines = [
        f"Dashboard{f' - welcome back, {user_name}' if user_name else ''}",
        f"  Total: {c.total}  Completed: {c.completed}  In progress: {c.in_progress}  Pending: {c.pending}",
        f"  Completion: {_bar(c.completion_rate)} {c.completion_rate}%",
        f"  Priority: high={p.get('high', 0)} medium={p.get('medium', 0)} low={p.get('low', 0)}",
        "  Recent tasks:",
    ]
    if summary.recent:
        lines.extend("    " + task_line(t) for t in summary.recent)
    else:
        lines.append("    No tasks yet. Create your first task to get started!")
    return "\n".join(lines)


def analytics(summary: AnalyticsSummary) -> str:
    c = summary.counts
    lines = [
        "Analytics",
        f"  Completion rate: {c.completion_rate}%   Created this month: {summary.monthly_created}",
        f"  Total: {c.total}   In progress: {c.in_progress}",
        "  Status:",
    ]
    lines.extend(f"    {s.label:<12} {_bar(s.percent)} {s.count} ({s.percent}%)" for s in summary.statuses)
    lines.append("  Priority:")
    lines.extend(f"    {s.label:<12} {_bar(s.percent)} {s.count} ({s.percent}%)" for s in summary.priorities)
    lines.append("  Completed, last 7 days:")
    lines.extend(f"    {d.day.strftime('%a %m-%d')} {'#' * d.completed} {d.completed}" for d in summary.week)
    if summary.categories:
        lines.append("  Categories:")
        lines.extend(f"    {name}: {n}" for name, n in summary.categories.items())
    return "\n".join(lines)


def month_calendar(cells: Sequence[CalendarCell], year: int, month: int) -> str:
    lines = [f"{_calendar.month_name[month]} {year}", " Sun  Mon  Tue  Wed  Thu  Fri  Sat"]
    for week in range(0, len(cells), 7):
        row = []
        for cell in cells[week : week + 7]:
            label = f"{cell.day.day:>2}" if cell.is_current_month else "  "
            mark = "*" if cell.tasks else " "
            today = ">" if cell.is_today else " "
            row.append(f"{today}{label}{mark} ")
        lines.append("".join(row).rstrip())
    due = [c for c in cells if c.is_current_month and c.tasks]
    if due:
        lines.append("Due this month:")
        for cell in due:
            lines.extend(f"  {cell.day.isoformat()} {task_line(t)}" for t in cell.tasks)
    return "\n".join(lines)


def day_tasks(tasks: Sequence[Task], label: str) -> str:
    if not tasks:
        return f"No tasks scheduled for {label}."
    return "\n".join([f"Tasks for {label}:", *("  " + task_line(t) for t in tasks)])


def member_since(created_at: str) -> str:
    dt = parse_iso(created_at)
    return dt.date().isoformat() if dt else "-"

# src/taskflow/tasks/task_filters.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task, TaskFilter


def apply_filter(tasks: Iterable[Task], flt: TaskFilter | None) -> list[Task]:
    if flt is None:
        return list(tasks)
    return [t for t in tasks if flt.matches(t)]


def search_tasks(tasks: Iterable[Task], term: str | None) -> list[Task]:
    """Case-insensitive substring match on title or description. Empty term keeps everything."""
    if not term:
        return list(tasks)
    needle = term.casefold()
    return [
        t
        for t in tasks
        if needle in t.title.casefold() or (t.description is not None and needle in t.description.casefold())
    ]


def categories(tasks: Iterable[Task]) -> list[str]:
    """Distinct categories in first-seen order."""
    seen: dict[str, None] = {}
    for t in tasks:
        seen.setdefault(t.category, None)
    return list(seen)

# src/taskflow/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..core.ports import TaskRepo
from .task_filters import apply_filter, categories, search_tasks
from .task_models import ALL, Task, TaskFilter

logger = logging.getLogger(__name__)

_FILTER_FIELDS = ("status", "priority", "category")


@dataclass
class TaskBoard:
    """
    In-memory task list of one user plus the active filter.

    Mutations go through the directory first; the in-memory list is patched
    only after the directory call succeeded. Errors are not swallowed.
    """

    repo: TaskRepo
    user_id: str
    tasks: list[Task] = field(default_factory=list)
    is_loading: bool = True
    error: str | None = None
    filter: TaskFilter = field(default_factory=TaskFilter)

    def load(self) -> list[Task]:
        self.is_loading = True
        if not self.user_id:
            self.tasks = []
            self.is_loading = False
            return self.tasks
        try:
            self.tasks = self.repo.list_tasks(self.user_id)
            self.error = None
        except Exception as e:
            logger.exception("Failed to load tasks user_id=%s", self.user_id)
            self.tasks = []
            self.error = str(e) or "Failed to load tasks"
        finally:
            self.is_loading = False
        return self.tasks

    refresh = load

    def create(self, task_data: dict[str, Any]) -> Task:
        task = self.repo.create_task(task_data, self.user_id)
        self.tasks = [*self.tasks, task]
        return task

    def update(self, task_id: str, updates: dict[str, Any]) -> Task:
        task = self.repo.update_task(task_id, updates)
        self.tasks = [task if t.id == task_id else t for t in self.tasks]
        return task

    def delete(self, task_id: str) -> None:
        self.repo.delete_task(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]

    def get(self, task_id: str) -> Task | None:
        """Find a loaded task by id or unique id prefix."""
        exact = next((t for t in self.tasks if t.id == task_id), None)
        if exact is not None:
            return exact
        matches = [t for t in self.tasks if task_id and t.id.startswith(task_id)]
        return matches[0] if len(matches) == 1 else None

    def set_filter(self, **changes: str) -> TaskFilter:
        for key, value in changes.items():
            if key not in _FILTER_FIELDS:
                raise ValueError(f"unknown filter field: {key}")
            setattr(self.filter, key, value or ALL)
        return self.filter

    def reset_filter(self) -> TaskFilter:
        self.filter = TaskFilter()
        return self.filter

    @property
    def filtered_tasks(self) -> list[Task]:
        return apply_filter(self.tasks, self.filter)

    def visible_tasks(self, search: str | None = None) -> list[Task]:
        """What the list screen shows: structured filter first, then the search box."""
        return search_tasks(self.filtered_tasks, search)

    @property
    def categories(self) -> list[str]:
        return categories(self.tasks)

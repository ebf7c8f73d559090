# tests/helpers.py

from __future__ import annotations

from typing import Any

from taskflow.tasks.task_models import Task

_counter = {"n": 0}


def make_task(**fields: Any) -> Task:
    """Build a Task from camelCase record fields with sensible defaults."""
    _counter["n"] += 1
    record: dict[str, Any] = {
        "id": f"task-{_counter['n']}",
        "title": "Task",
        "priority": "medium",
        "status": "pending",
        "category": "general",
        "createdAt": "2024-03-10T09:00:00.000Z",
        "updatedAt": "2024-03-10T09:00:00.000Z",
        "userId": "u1",
    }
    record.update(fields)
    return Task.from_record(record)

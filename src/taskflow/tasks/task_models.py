# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

ALL = "all"


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    There is no transition graph: any status can be set from any other.
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


# Keys owned by the directory; callers cannot set them on create.
SERVER_FIELDS = frozenset({"id", "createdAt", "updatedAt", "userId"})

_KNOWN = frozenset(
    {"id", "title", "description", "priority", "status", "category", "dueDate", "createdAt", "updatedAt", "userId"}
)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: TaskPriority
    status: TaskStatus
    category: str
    created_at: str
    updated_at: str
    user_id: str

    description: str | None = None
    due_date: str | None = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task:
        description = raw.get("description")
        due_date = raw.get("dueDate")
        return cls(
            id=str(raw.get("id") or ""),
            title=str(raw.get("title") or ""),
            priority=TaskPriority.from_db(raw.get("priority")),
            status=TaskStatus.from_db(raw.get("status")),
            category=str(raw.get("category") or ""),
            created_at=str(raw.get("createdAt") or ""),
            updated_at=str(raw.get("updatedAt") or ""),
            user_id=str(raw.get("userId") or ""),
            description=None if description is None else str(description),
            due_date=str(due_date) if due_date else None,
            extra={k: v for k, v in raw.items() if k not in _KNOWN},
        )

    def to_record(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out["id"] = self.id
        out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        out["priority"] = self.priority.value
        out["status"] = self.status.value
        out["category"] = self.category
        if self.due_date is not None:
            out["dueDate"] = self.due_date
        out["createdAt"] = self.created_at
        out["updatedAt"] = self.updated_at
        out["userId"] = self.user_id
        return out


@dataclass(slots=True)
class TaskFilter:
    """Transient list filter; each field is an exact value or the "all" sentinel."""

    status: str = ALL
    priority: str = ALL
    category: str = ALL

    def matches(self, task: Task) -> bool:
        if self.status != ALL and task.status != self.status:
            return False
        if self.priority != ALL and task.priority != self.priority:
            return False
        if self.category != ALL and task.category != self.category:
            return False
        return True

    def is_default(self) -> bool:
        return self.status == ALL and self.priority == ALL and self.category == ALL

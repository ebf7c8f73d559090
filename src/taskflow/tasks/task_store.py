# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from ..core.clock import Clock, next_timestamp, to_iso, utc_now
from ..core.errors import InvalidTaskData, TaskNotFound
from ..core.ports import KeyValueStore
from ..storage.kv_store import TASKS_KEY, encode_json, load_records, save_records
from .task_models import SERVER_FIELDS, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "general"


def _new_id() -> str:
    return uuid.uuid4().hex


def _check_enum(updates: dict[str, Any], key: str, enum: type[TaskStatus] | type[TaskPriority]) -> None:
    if key not in updates:
        return
    raw = updates[key]
    try:
        updates[key] = enum(raw).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum)
        raise InvalidTaskData(f"{key} must be one of: {allowed} (got {raw!r})") from None


def _clean_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Validate caller-supplied task fields; returns a normalized copy."""
    out = dict(data)
    if "title" in out:
        title = str(out["title"] or "").strip()
        if not title:
            raise InvalidTaskData("title is required")
        out["title"] = title
    _check_enum(out, "status", TaskStatus)
    _check_enum(out, "priority", TaskPriority)
    if "category" in out:
        out["category"] = str(out["category"] or "").strip() or DEFAULT_CATEGORY
    if "dueDate" in out and not out["dueDate"]:
        out.pop("dueDate")
    return out


class TaskDirectory:
    """
    Task records kept as one JSON array in the key-value store.

    Semantics (kept on purpose, no locking):
    - every mutation is a full read-modify-write of the whole array
    - records are merged at the dict level, so unknown keys survive
    - reads are scoped by userId; update/delete address a task by id only
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._clock = clock
        self._new_id = id_factory

    # ---- low-level helpers ----

    def _get_all(self) -> list[dict[str, Any]]:
        return load_records(self._store, TASKS_KEY)

    def _set_all(self, records: list[dict[str, Any]]) -> None:
        save_records(self._store, TASKS_KEY, records)

    # ---- public API ----

    def list_tasks(self, user_id: str) -> list[Task]:
        tasks = [Task.from_record(r) for r in self._get_all() if r.get("userId") == user_id]
        logger.debug("Listed tasks user_id=%s n=%s", user_id, len(tasks))
        return tasks

    def create_task(self, task_data: dict[str, Any], user_id: str) -> Task:
        data = {k: v for k, v in task_data.items() if k not in SERVER_FIELDS}
        if "title" not in data:
            raise InvalidTaskData("title is required")
        data.setdefault("priority", TaskPriority.MEDIUM.value)
        data.setdefault("status", TaskStatus.PENDING.value)
        data.setdefault("category", DEFAULT_CATEGORY)
        data = _clean_fields(data)

        now = to_iso(self._clock())
        record = {
            **data,
            "id": self._new_id(),
            "userId": user_id,
            "createdAt": now,
            "updatedAt": now,
        }

        records = self._get_all()
        records.append(record)
        self._set_all(records)
        logger.info("Task created id=%s user_id=%s", record["id"], user_id)
        return Task.from_record(record)

    def update_task(self, task_id: str, updates: dict[str, Any]) -> Task:
        records = self._get_all()
        idx = next((i for i, r in enumerate(records) if r.get("id") == task_id), None)
        if idx is None:
            raise TaskNotFound(task_id)

        changes = _clean_fields({k: v for k, v in updates.items() if k != "id"})
        current = records[idx]
        if "dueDate" in updates and "dueDate" not in changes:
            current = {k: v for k, v in current.items() if k != "dueDate"}

        merged = {**current, **changes}
        merged["updatedAt"] = to_iso(next_timestamp(self._clock(), current.get("updatedAt")))
        records[idx] = merged
        self._set_all(records)
        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        return Task.from_record(merged)

    def delete_task(self, task_id: str) -> None:
        records = self._get_all()
        kept = [r for r in records if r.get("id") != task_id]
        if len(kept) == len(records):
            logger.debug("Delete of unknown task id=%s ignored.", task_id)
            return
        self._set_all(kept)
        logger.info("Task deleted id=%s", task_id)

    def all_tasks(self) -> list[dict[str, Any]]:
        """Every stored record, all users, as raw dicts (export)."""
        return self._get_all()

    def replace_all(self, records: list[Any]) -> None:
        """Overwrite the whole collection as-is (import). No validation."""
        self._store.set(TASKS_KEY, encode_json(records))
        logger.info("Task collection replaced n=%s", len(records))

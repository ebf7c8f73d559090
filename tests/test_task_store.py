# tests/test_task_store.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskflow.core.clock import parse_iso
from taskflow.core.errors import InvalidTaskData, NotFound, TaskNotFound
from taskflow.storage.kv_store import TASKS_KEY, SqliteKeyValueStore
from taskflow.tasks.task_models import TaskPriority, TaskStatus
from taskflow.tasks.task_store import TaskDirectory

from .fakes import FakeClock, SequentialIds


def test_create_assigns_server_fields(tasks, kv) -> None:
    task = tasks.create_task(
        {
            "title": "  Write report ",
            "description": "Q1 numbers",
            "priority": "high",
            "category": "work",
            "dueDate": "2024-03-20",
            "id": "forged",
            "userId": "someone-else",
            "createdAt": "1999-01-01T00:00:00.000Z",
        },
        "u1",
    )

    assert task.id == "t0001"
    assert task.user_id == "u1"
    assert task.title == "Write report"
    assert task.priority is TaskPriority.HIGH
    assert task.status is TaskStatus.PENDING
    assert task.created_at == task.updated_at == "2024-03-15T10:00:00.000Z"
    assert task.due_date == "2024-03-20"

    stored = json.loads(kv.data[TASKS_KEY])
    assert stored[0]["id"] == "t0001"
    assert stored[0]["userId"] == "u1"
    assert stored[0]["status"] == "pending"


def test_create_defaults_and_validation(tasks) -> None:
    task = tasks.create_task({"title": "Bare"}, "u1")
    assert task.priority is TaskPriority.MEDIUM
    assert task.category == "general"
    assert task.description is None
    assert task.due_date is None

    with pytest.raises(InvalidTaskData):
        tasks.create_task({"title": "   "}, "u1")
    with pytest.raises(InvalidTaskData):
        tasks.create_task({"description": "no title"}, "u1")
    with pytest.raises(InvalidTaskData):
        tasks.create_task({"title": "x", "priority": "urgent"}, "u1")
    with pytest.raises(ValueError):
        tasks.create_task({"title": "x", "status": "done"}, "u1")


def test_list_is_scoped_by_user_in_storage_order(tasks) -> None:
    tasks.create_task({"title": "a1"}, "alice")
    tasks.create_task({"title": "b1"}, "bob")
    tasks.create_task({"title": "a2"}, "alice")

    assert [t.title for t in tasks.list_tasks("alice")] == ["a1", "a2"]
    assert [t.title for t in tasks.list_tasks("bob")] == ["b1"]
    assert tasks.list_tasks("carol") == []


def test_update_refreshes_updated_at_strictly(tasks, clock) -> None:
    task = tasks.create_task({"title": "Ship"}, "u1")

    # Same instant on the clock: the new timestamp must still move forward.
    updated = tasks.update_task(task.id, {"status": "completed"})
    assert updated.status is TaskStatus.COMPLETED
    assert parse_iso(updated.updated_at) > parse_iso(task.updated_at)

    clock.advance(minutes=5)
    again = tasks.update_task(task.id, {"priority": "low"})
    assert again.updated_at == "2024-03-15T10:05:00.000Z"

    [listed] = tasks.list_tasks("u1")
    assert listed.status is TaskStatus.COMPLETED
    assert listed.priority is TaskPriority.LOW
    assert listed.created_at == task.created_at
    assert parse_iso(listed.updated_at) > parse_iso(task.updated_at)


def test_update_missing_task_raises(tasks) -> None:
    with pytest.raises(TaskNotFound) as exc_info:
        tasks.update_task("nope", {"status": "completed"})
    assert isinstance(exc_info.value, NotFound)


def test_update_merges_and_keeps_unknown_keys(tasks, kv) -> None:
    kv.data[TASKS_KEY] = json.dumps(
        [
            {
                "id": "legacy",
                "title": "Old",
                "priority": "low",
                "status": "pending",
                "category": "home",
                "dueDate": "2024-03-01",
                "createdAt": "2024-01-01T00:00:00.000Z",
                "updatedAt": "2024-01-01T00:00:00.000Z",
                "userId": "u1",
                "color": "teal",
            }
        ]
    )

    updated = tasks.update_task("legacy", {"title": "New", "dueDate": "", "id": "hijack"})

    assert updated.id == "legacy"
    assert updated.title == "New"
    assert updated.due_date is None
    assert updated.category == "home"
    assert updated.extra == {"color": "teal"}
    assert json.loads(kv.data[TASKS_KEY])[0]["color"] == "teal"


def test_update_does_not_check_ownership(tasks) -> None:
    task = tasks.create_task({"title": "Bob's"}, "bob")
    updated = tasks.update_task(task.id, {"status": "in-progress"})
    assert updated.user_id == "bob"
    assert updated.status is TaskStatus.IN_PROGRESS


def test_update_rejects_bad_enum_values(tasks) -> None:
    task = tasks.create_task({"title": "x"}, "u1")
    with pytest.raises(InvalidTaskData):
        tasks.update_task(task.id, {"status": "archived"})


def test_delete_removes_task(tasks) -> None:
    keep = tasks.create_task({"title": "keep"}, "u1")
    drop = tasks.create_task({"title": "drop"}, "u1")

    tasks.delete_task(drop.id)

    assert [t.id for t in tasks.list_tasks("u1")] == [keep.id]


def test_delete_missing_id_does_not_write(tasks, kv) -> None:
    tasks.create_task({"title": "only"}, "u1")
    before = kv.data[TASKS_KEY]
    writes = list(kv.writes)

    tasks.delete_task("does-not-exist")

    assert kv.data[TASKS_KEY] == before
    assert kv.writes == writes


def test_delete_missing_id_sqlite_blob_unchanged(tmp_path: Path) -> None:
    store = SqliteKeyValueStore(tmp_path / "store.sqlite3")
    directory = TaskDirectory(store, clock=FakeClock(), id_factory=SequentialIds("t"))
    directory.create_task({"title": "only"}, "u1")
    before = store.get(TASKS_KEY)

    directory.delete_task("does-not-exist")
    directory.delete_task("does-not-exist")

    assert store.get(TASKS_KEY) == before


def test_malformed_task_blob_lists_empty(tasks, kv) -> None:
    kv.data[TASKS_KEY] = "<<<garbage>>>"
    assert tasks.list_tasks("u1") == []

    created = tasks.create_task({"title": "fresh"}, "u1")
    assert [t.id for t in tasks.list_tasks("u1")] == [created.id]


def test_replace_all_and_all_tasks(tasks) -> None:
    tasks.create_task({"title": "a"}, "u1")
    tasks.replace_all([{"id": "x", "title": "imported", "userId": "u2"}])

    assert tasks.all_tasks() == [{"id": "x", "title": "imported", "userId": "u2"}]
    assert tasks.list_tasks("u1") == []
    [imported] = tasks.list_tasks("u2")
    assert imported.status is TaskStatus.PENDING

# tests/conftest.py

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.accounts.account_store import AccountDirectory
from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState
from taskflow.storage.kv_store import SqliteKeyValueStore
from taskflow.tasks.task_store import TaskDirectory

from .fakes import FakeClock, FakeKeyValueStore, SequentialIds


@pytest.fixture(autouse=True)
def local_tz() -> Iterator[Callable[[str], None]]:
    """
    Pin the process time zone (UTC unless a test asks for another one).

    Day and month buckets follow local wall-clock time, so tests must not
    depend on the machine they run on.
    """
    original = os.environ.get("TZ")

    def set_tz(name: str) -> None:
        if not hasattr(time, "tzset"):
            pytest.skip("time.tzset() is not available on this platform")
        os.environ["TZ"] = name
        time.tzset()

    if hasattr(time, "tzset"):
        set_tz("UTC")
    yield set_tz

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    if hasattr(time, "tzset"):
        time.tzset()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_path=tmp_path / "store.sqlite3",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path,
        recent_limit=5,
        min_password_length=6,
    )


@pytest.fixture()
def kv() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def accounts(kv: FakeKeyValueStore, clock: FakeClock) -> AccountDirectory:
    return AccountDirectory(kv, clock=clock, id_factory=SequentialIds("u"))


@pytest.fixture()
def tasks(kv: FakeKeyValueStore, clock: FakeClock) -> TaskDirectory:
    return TaskDirectory(kv, clock=clock, id_factory=SequentialIds("t"))


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: We keep the real SQLite store here because its behaviour
    (whole-blob reads and writes) is part of what we want to test.
    """
    return create_initial_state(settings=settings, store=SqliteKeyValueStore(settings.store_path))

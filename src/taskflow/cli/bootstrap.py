# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires one key-value store into both directories and the session.
"""

from __future__ import annotations

import logging

from ..accounts.account_api import SessionState
from ..accounts.account_store import AccountDirectory
from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.task_store import TaskDirectory

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, store: KeyValueStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the store) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings(); if store is None, opens SQLite at settings.store_path.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if store is None:
        store = SqliteKeyValueStore(settings.store_path)

    accounts = AccountDirectory(
        store,
        min_password_length=int(getattr(settings, "min_password_length", 6)),
    )
    state = AppState(
        settings=settings,
        store=store,
        accounts=accounts,
        task_repo=TaskDirectory(store),
        session=SessionState(accounts=accounts),
    )

    if state.session.check() is not None:
        logger.info("Session restored user_id=%s", state.session.user.id)  # type: ignore[union-attr]
    state.open_board()
    return state

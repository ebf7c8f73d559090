# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..accounts.account_api import SessionState
from ..tasks.task_api import TaskBoard
from .ports import AccountRepo, KeyValueStore, TaskRepo


@dataclass
class AppState:
    # Settings live on the state so commands do not reach for globals.
    settings: Any

    store: KeyValueStore
    accounts: AccountRepo
    task_repo: TaskRepo

    session: SessionState
    board: TaskBoard | None = None

    # Calendar screen cursor (year, month); None until first shown.
    calendar_month: tuple[int, int] | None = None
    search: str = ""

    extra: dict[str, Any] = field(default_factory=dict)

    def open_board(self) -> TaskBoard | None:
        """(Re)build the task board for the session user, or drop it when logged out."""
        user = self.session.user
        if user is None:
            self.board = None
            return None
        self.board = TaskBoard(repo=self.task_repo, user_id=user.id)
        self.board.load()
        self.search = ""
        return self.board

# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the session and board state and the console shell.

Directories and state objects depend on Protocols instead of concrete implementations.
This keeps the storage backend swappable and makes testing easier.
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Synchronous blob store (localStorage-like): string keys, string values."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def clear(self) -> None: ...


class AccountRepo(Protocol):
    def register(self, email: str, password: str, name: str) -> Any: ...
    def login(self, email: str, password: str) -> Any: ...
    def logout(self) -> None: ...
    def get_current_user(self) -> Any | None: ...

    # Settings screen
    def update_profile(self, user_id: str, *, name: str | None = None, email: str | None = None) -> Any: ...
    def change_password(self, user_id: str, current: str, new: str, confirm: str) -> None: ...
    def delete_account(self) -> None: ...


class TaskRepo(Protocol):
    def list_tasks(self, user_id: str) -> list[Any]: ...
    def create_task(self, task_data: dict[str, Any], user_id: str) -> Any: ...
    def update_task(self, task_id: str, updates: dict[str, Any]) -> Any: ...
    def delete_task(self, task_id: str) -> None: ...

    # Export / import
    def all_tasks(self) -> list[dict[str, Any]]: ...
    def replace_all(self, records: list[Any]) -> None: ...

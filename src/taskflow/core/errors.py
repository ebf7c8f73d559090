# src/taskflow/core/errors.py

"""
Error taxonomy shared by the directories, the session state and the console commands.

Every error the user may see derives from TaskflowError; the console turns
these into a single readable line. Anything else is treated as a bug.
"""

from __future__ import annotations


class TaskflowError(Exception):
    """Base class for user-facing failures."""


class DuplicateAccount(TaskflowError):
    def __init__(self, email: str) -> None:
        super().__init__("User already exists")
        self.email = email


class NotFound(TaskflowError):
    pass


class UserNotFound(NotFound):
    def __init__(self, key: str) -> None:
        super().__init__("User not found")
        self.key = key


class TaskNotFound(NotFound):
    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class InvalidCredentials(TaskflowError):
    def __init__(self) -> None:
        super().__init__("Invalid password")


class PasswordMismatch(TaskflowError):
    def __init__(self) -> None:
        super().__init__("New passwords do not match!")


class WeakPassword(TaskflowError):
    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password must be at least {min_length} characters long!")
        self.min_length = min_length


class InvalidTaskData(TaskflowError, ValueError):
    pass


class InvalidImportFile(TaskflowError):
    def __init__(self, reason: str = "") -> None:
        super().__init__("Invalid file format!")
        self.reason = reason


class MalformedStoredData(TaskflowError):
    """Raised by decoders; directories catch it and fall back to empty data."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Malformed data under {key!r}: {reason}")
        self.key = key
        self.reason = reason

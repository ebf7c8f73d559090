# src/taskflow/accounts/account_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.errors import TaskflowError
from ..core.ports import AccountRepo
from .account_models import User

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """
    In-memory view of the authenticated session.

    Wraps the account directory; `user` never carries the password.
    `error` holds the message of the last failed login/register.
    """

    accounts: AccountRepo
    user: User | None = None
    is_loading: bool = True
    error: str | None = field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def check(self) -> User | None:
        """Restore the session from storage (start-up)."""
        try:
            current = self.accounts.get_current_user()
        except Exception:
            logger.exception("Session restore failed.")
            current = None
        self.user = current.public() if current is not None else None
        self.is_loading = False
        self.error = None
        return self.user

    def login(self, email: str, password: str) -> User:
        self.is_loading = True
        self.error = None
        try:
            user = self.accounts.login(email, password)
        except TaskflowError as e:
            self._fail(str(e) or "Login failed")
            raise
        return self._succeed(user)

    def register(self, email: str, password: str, name: str) -> User:
        self.is_loading = True
        self.error = None
        try:
            user = self.accounts.register(email, password, name)
        except TaskflowError as e:
            self._fail(str(e) or "Registration failed")
            raise
        return self._succeed(user)

    def logout(self) -> None:
        try:
            self.accounts.logout()
        except Exception:
            logger.exception("Logout failed.")
            return
        self.user = None
        self.is_loading = False
        self.error = None

    def refresh(self, user: User) -> None:
        """Replace the in-memory user after a profile change."""
        self.user = user.public()

    def _succeed(self, user: User) -> User:
        self.user = user.public()
        self.is_loading = False
        self.error = None
        return self.user

    def _fail(self, message: str) -> None:
        # The stored pointer must not outlive the in-memory session.
        try:
            self.accounts.logout()
        except Exception:
            logger.exception("Clearing the stored session failed.")
        self.user = None
        self.is_loading = False
        self.error = message

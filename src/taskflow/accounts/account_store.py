# src/taskflow/accounts/account_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from ..core.clock import Clock, to_iso, utc_now
from ..core.errors import (
    DuplicateAccount,
    InvalidCredentials,
    MalformedStoredData,
    PasswordMismatch,
    UserNotFound,
    WeakPassword,
)
from ..core.ports import KeyValueStore
from ..storage.kv_store import (
    SESSION_KEY,
    USERS_KEY,
    decode_json,
    encode_json,
    load_records,
    save_records,
)
from .account_models import User

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 6


def _new_id() -> str:
    return uuid.uuid4().hex


class AccountDirectory:
    """
    User accounts and the current-session pointer, kept in the key-value store.

    Every mutation reads the whole user list, changes it in memory and writes
    the whole list back. Emails are unique; nothing is ever hashed.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = _new_id,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ) -> None:
        self._store = store
        self._clock = clock
        self._new_id = id_factory
        self._min_password_length = int(min_password_length)

    # ---- low-level helpers ----

    def _get_users(self) -> list[User]:
        return [User.from_record(r) for r in load_records(self._store, USERS_KEY)]

    def _set_users(self, users: list[User]) -> None:
        save_records(self._store, USERS_KEY, [u.to_record() for u in users])

    def _set_current_user(self, user: User) -> None:
        self._store.set(SESSION_KEY, encode_json(user.to_record()))

    @staticmethod
    def _index_of(users: list[User], user_id: str) -> int:
        for i, u in enumerate(users):
            if u.id == user_id:
                return i
        raise UserNotFound(user_id)

    # ---- public API ----

    def register(self, email: str, password: str, name: str) -> User:
        users = self._get_users()
        if any(u.email == email for u in users):
            logger.info("Registration rejected, email already used email=%s", email)
            raise DuplicateAccount(email)

        user = User(
            id=self._new_id(),
            email=email,
            name=name,
            password=password,
            created_at=to_iso(self._clock()),
        )
        users.append(user)
        self._set_users(users)
        self._set_current_user(user)
        logger.info("User registered id=%s email=%s", user.id, email)
        return user

    def login(self, email: str, password: str) -> User:
        user = next((u for u in self._get_users() if u.email == email), None)
        if user is None:
            logger.info("Login failed, unknown email=%s", email)
            raise UserNotFound(email)
        if user.password != password:
            logger.info("Login failed, wrong password email=%s", email)
            raise InvalidCredentials()

        self._set_current_user(user)
        logger.info("User logged in id=%s", user.id)
        return user

    def logout(self) -> None:
        self._store.delete(SESSION_KEY)
        logger.info("Session cleared.")

    def get_current_user(self) -> User | None:
        try:
            data = decode_json(SESSION_KEY, self._store.get(SESSION_KEY))
        except MalformedStoredData as e:
            logger.warning("Ignoring malformed session reason=%s", e.reason)
            return None
        if not isinstance(data, dict):
            return None
        return User.from_record(data)

    def update_profile(self, user_id: str, *, name: str | None = None, email: str | None = None) -> User:
        users = self._get_users()
        idx = self._index_of(users, user_id)
        user = users[idx]

        if email is not None and email != user.email:
            if any(u.email == email and u.id != user_id for u in users):
                raise DuplicateAccount(email)
            user.email = email
        if name is not None:
            user.name = name

        self._set_users(users)
        current = self.get_current_user()
        if current is not None and current.id == user_id:
            self._set_current_user(user)
        logger.info("Profile updated id=%s", user_id)
        return user

    def change_password(self, user_id: str, current: str, new: str, confirm: str) -> None:
        if new != confirm:
            raise PasswordMismatch()
        if len(new) < self._min_password_length:
            raise WeakPassword(self._min_password_length)

        users = self._get_users()
        idx = self._index_of(users, user_id)
        if users[idx].password != current:
            raise InvalidCredentials()

        users[idx].password = new
        self._set_users(users)
        session = self.get_current_user()
        if session is not None and session.id == user_id:
            self._set_current_user(users[idx])
        logger.info("Password changed id=%s", user_id)

    def delete_account(self) -> None:
        """Wipe all local data: every user, every task and the session."""
        self._store.clear()
        logger.info("All local data cleared (account deletion).")

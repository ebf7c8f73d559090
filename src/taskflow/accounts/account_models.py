# src/taskflow/accounts/account_models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(slots=True)
class User:
    id: str
    email: str
    name: str
    created_at: str

    # Plaintext placeholder, compared by equality. None on session-visible copies.
    password: str | None = None
    avatar: str | None = None

    # Unknown keys found in storage, written back untouched.
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> User:
        known = {"id", "email", "name", "password", "avatar", "createdAt"}
        password = raw.get("password")
        avatar = raw.get("avatar")
        return cls(
            id=str(raw.get("id") or ""),
            email=str(raw.get("email") or ""),
            name=str(raw.get("name") or ""),
            created_at=str(raw.get("createdAt") or ""),
            password=None if password is None else str(password),
            avatar=None if avatar is None else str(avatar),
            extra={k: v for k, v in raw.items() if k not in known},
        )

    def to_record(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out.update(id=self.id, email=self.email, name=self.name)
        if self.password is not None:
            out["password"] = self.password
        if self.avatar is not None:
            out["avatar"] = self.avatar
        out["createdAt"] = self.created_at
        return out

    def public(self) -> User:
        """Copy without the password, as held by the session."""
        return replace(self, password=None, extra=dict(self.extra))

"""Typed access to the signed-in user snapshot kept in the browser session."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Protocol

from flask import session

from lighthouse.core.auth.csrf import issue_csrf_token

SESSION_USER_KEY = "user"


@dataclass(frozen=True)
class SessionUser:
    """Minimal user fields copied into the session at login."""

    id: int
    email: str
    name: Optional[str]
    is_admin: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["SessionUser"]:
        if not data or data.get("id") is None:
            return None
        return cls(
            id=int(data["id"]),
            email=str(data.get("email") or ""),
            name=data.get("name"),
            is_admin=bool(data.get("is_admin")),
        )

    @classmethod
    def from_user(cls, user) -> "SessionUser":
        return cls(id=user.id, email=user.email, name=user.name, is_admin=bool(user.is_admin))


class SessionStore(Protocol):
    def get_user(self) -> Optional[SessionUser]: ...

    def set_user(self, user: SessionUser) -> None: ...

    def destroy(self) -> None: ...


class FlaskSessionStore:
    """SessionStore backed by Flask's signed-cookie session for the current request."""

    def get_user(self) -> Optional[SessionUser]:
        raw = session.get(SESSION_USER_KEY)
        if not isinstance(raw, Mapping):
            return None
        return SessionUser.from_dict(raw)

    def set_user(self, user: SessionUser) -> None:
        # Fresh session on login so nothing from the anonymous visit carries
        # over, including its CSRF token.
        session.clear()
        session.permanent = True
        session[SESSION_USER_KEY] = user.to_dict()
        issue_csrf_token()

    def destroy(self) -> None:
        session.clear()


__all__ = ["FlaskSessionStore", "SESSION_USER_KEY", "SessionStore", "SessionUser"]

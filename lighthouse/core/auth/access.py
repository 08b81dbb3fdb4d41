"""Admission gates for protected routes.

The gate answers one question per request: may this visitor reach the
handler, and if not, where should they go instead. It only reads the
session snapshot through a ``SessionStore``; it never queries the database
and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import current_app, flash, redirect, url_for

from lighthouse.core.auth.session_store import SessionStore

F = TypeVar("F", bound=Callable)

LOGIN_ENDPOINT = "auth.login"
HOME_ENDPOINT = "site.home"
ADMIN_HOME_ENDPOINT = "admin.dashboard"

SIGN_IN_NOTICE = "Please sign in to access this page."
FORBIDDEN_NOTICE = "You do not have permission to access this page."


@dataclass(frozen=True)
class Admission:
    admitted: bool
    redirect_endpoint: Optional[str] = None
    notice: Optional[str] = None

    @classmethod
    def admit(cls) -> "Admission":
        return cls(admitted=True)

    @classmethod
    def deny(cls, redirect_endpoint: str, notice: Optional[str] = None) -> "Admission":
        return cls(admitted=False, redirect_endpoint=redirect_endpoint, notice=notice)


def _flash_error(message: str) -> None:
    flash(message, "error")


class AccessGate:
    """Evaluate admission for the current request's session."""

    def __init__(self, store: SessionStore, notify: Callable[[str], None] = _flash_error):
        self.store = store
        self.notify = notify

    def require_session(self) -> Admission:
        if self.store.get_user() is not None:
            return Admission.admit()
        return self._deny(LOGIN_ENDPOINT, SIGN_IN_NOTICE)

    def require_admin(self) -> Admission:
        user = self.store.get_user()
        if user is None:
            return self._deny(LOGIN_ENDPOINT, SIGN_IN_NOTICE)
        if user.is_admin:
            return Admission.admit()
        # Signed in without privileges: a neutral page, not the login form.
        return self._deny(HOME_ENDPOINT, FORBIDDEN_NOTICE)

    def reject_if_authenticated(self) -> Admission:
        if self.store.get_user() is None:
            return Admission.admit()
        return Admission.deny(ADMIN_HOME_ENDPOINT)

    def _deny(self, endpoint: str, notice: str) -> Admission:
        self.notify(notice)
        return Admission.deny(endpoint, notice)


def _gated(check: str) -> Callable[[F], F]:
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            gate: AccessGate = current_app.extensions["access_gate"]
            admission = getattr(gate, check)()
            if not admission.admitted:
                return redirect(url_for(admission.redirect_endpoint))
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


login_required = _gated("require_session")
admin_required = _gated("require_admin")
anonymous_required = _gated("reject_if_authenticated")


__all__ = [
    "AccessGate",
    "Admission",
    "admin_required",
    "anonymous_required",
    "login_required",
]

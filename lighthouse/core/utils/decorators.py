"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import abort, current_app, request

from lighthouse.core.auth.csrf import token_from_request, validate_csrf_token

F = TypeVar("F", bound=Callable)


def csrf_protected(fn: F) -> F:
    """Validate the CSRF token on state-changing form posts."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return fn(*args, **kwargs)
        if not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        if not validate_csrf_token(token_from_request()):
            abort(400, description="CSRF token missing or invalid")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]

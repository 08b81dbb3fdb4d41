"""Session-bound CSRF tokens for the admin and sign-in forms.

Templates embed the token as a hidden ``csrf_token`` field. A new token is
issued whenever the session changes hands (sign-in), so a token captured on
the anonymous login page is worthless once an admin is signed in.
"""

from __future__ import annotations

import secrets
from typing import Optional

from flask import request, session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def issue_csrf_token() -> str:
    token = secrets.token_hex(32)
    session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def generate_csrf_token() -> str:
    """Token for the current session, issued on first use."""
    return session.get(CSRF_TOKEN_SESSION_KEY) or issue_csrf_token()


def token_from_request() -> Optional[str]:
    return request.form.get(CSRF_FORM_FIELD) or request.headers.get(CSRF_HEADER)


def validate_csrf_token(token: Optional[str]) -> bool:
    expected = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)


__all__ = [
    "CSRF_FORM_FIELD",
    "CSRF_HEADER",
    "CSRF_TOKEN_SESSION_KEY",
    "generate_csrf_token",
    "issue_csrf_token",
    "token_from_request",
    "validate_csrf_token",
]

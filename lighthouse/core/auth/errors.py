"""Failure taxonomy for sign-in and password recovery.

Every error carries a stable ``code`` (useful in logs and tests) and a
generic ``message`` safe to show to the visitor. Provider detail such as an
SMTP reply code travels separately in ``diagnostic`` and is only logged.
"""

from __future__ import annotations

import enum
from typing import Optional


class TokenInvalidReason(str, enum.Enum):
    EMPTY_TOKEN = "empty_token"
    TOKEN_NOT_FOUND = "token_not_found"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_ALREADY_USED = "token_already_used"


_TOKEN_MESSAGES = {
    TokenInvalidReason.EMPTY_TOKEN: "The reset link is missing its token.",
    TokenInvalidReason.TOKEN_NOT_FOUND: "This reset link is invalid or has expired.",
    TokenInvalidReason.TOKEN_EXPIRED: "This reset link has expired. Please request a new one.",
    TokenInvalidReason.TOKEN_ALREADY_USED: "This reset link has already been used.",
}


class AuthError(Exception):
    code = "auth_error"
    message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    code = "invalid_credentials"
    # Shared by unknown-account and wrong-password paths.
    message = "Invalid email or password."


class AccountNotFound(AuthError):
    code = "account_not_found"
    message = "If the address belongs to an account, a reset link is on its way."


class TokenInvalid(AuthError):
    code = "token_invalid"

    def __init__(self, reason: TokenInvalidReason):
        self.reason = reason
        super().__init__(_TOKEN_MESSAGES[reason])


class PasswordTooShort(AuthError):
    code = "password_too_short"

    def __init__(self, min_length: int = 8):
        self.min_length = min_length
        super().__init__(f"Password must be at least {min_length} characters long.")


class PasswordMismatch(AuthError):
    code = "password_mismatch"
    message = "Passwords do not match."


class DeliveryFailed(AuthError):
    code = "delivery_failed"
    message = "We could not send the reset email. Please check the address or try again later."

    def __init__(self, diagnostic: Optional[str] = None):
        self.diagnostic = diagnostic
        super().__init__()


__all__ = [
    "AccountNotFound",
    "AuthError",
    "DeliveryFailed",
    "InvalidCredentials",
    "PasswordMismatch",
    "PasswordTooShort",
    "TokenInvalid",
    "TokenInvalidReason",
]

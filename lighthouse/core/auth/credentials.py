"""Credential verification and the forgot-password token lifecycle.

Token states: none -> issued (request_password_recovery) -> consumed
(commit_new_password) or expired (checked lazily on verification). A new
request overwrites the previous token in place, so at most one token per
account is ever live.
"""

from __future__ import annotations

import enum
import logging
import secrets
from datetime import datetime, timedelta
from hashlib import sha256
from typing import Callable, Optional
from urllib.parse import urlencode

from lighthouse.core.auth.errors import (
    AccountNotFound,
    DeliveryFailed,
    InvalidCredentials,
    PasswordTooShort,
    TokenInvalid,
    TokenInvalidReason,
)
from lighthouse.core.auth.password import hash_password, verify_password
from lighthouse.core.auth.session_store import SessionUser
from lighthouse.core.mail.mailer import Mailer
from lighthouse.core.users.models import User
from lighthouse.core.users.repository import UserRepository

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL_SECONDS = 3600
PASSWORD_MIN_LENGTH = 8
RESET_PATH = "/auth/reset-password"


class RecoveryOutcome(str, enum.Enum):
    TOKEN_ISSUED = "token_issued"
    NO_SUCH_ACCOUNT = "no_such_account"


def hash_token(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


class CredentialManager:
    """Sign-in checks and password recovery for administrative accounts."""

    def __init__(
        self,
        users: UserRepository,
        mailer: Mailer,
        *,
        app_url: str,
        token_ttl_seconds: int = RESET_TOKEN_TTL_SECONDS,
        min_password_length: int = PASSWORD_MIN_LENGTH,
        clock: Callable[[], datetime] = datetime.utcnow,
        hasher: Callable[[str], str] = hash_password,
        verifier: Callable[[str, str], bool] = verify_password,
    ):
        self.users = users
        self.mailer = mailer
        self.app_url = app_url.rstrip("/")
        self.token_ttl = timedelta(seconds=token_ttl_seconds)
        self.min_password_length = min_password_length
        self.clock = clock
        self.hasher = hasher
        self.verifier = verifier
        self._dummy_hash: Optional[str] = None

    # --- sign in ---

    def verify_credentials(self, email: str, password: str) -> SessionUser:
        user = self.users.find_by_email(email)
        if user is None:
            # Same bcrypt cost as a wrong password, so timing does not reveal the account.
            self.verifier(password or "", self._placeholder_hash())
            logger.info("Login failed for %s: no account", (email or "").strip().lower())
            raise InvalidCredentials()
        if not self.verifier(password or "", user.password_hash):
            logger.info("Login failed for %s: password mismatch", user.email)
            raise InvalidCredentials()

        self._stamp_last_login(user)
        return SessionUser.from_user(user)

    def _placeholder_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher(secrets.token_hex(16))
        return self._dummy_hash

    def _stamp_last_login(self, user: User) -> None:
        try:
            self.users.update(user, last_login=self.clock())
        except Exception:
            logger.exception("Could not record last login for user %s", user.id)

    # --- recovery ---

    def request_password_recovery(self, email: str) -> RecoveryOutcome:
        try:
            user = self._recovery_target(email)
        except AccountNotFound:
            logger.info("Password recovery requested for unknown address")
            return RecoveryOutcome.NO_SUCH_ACCOUNT

        raw_token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = self.clock() + self.token_ttl
        self.users.update(
            user,
            reset_password_token=hash_token(raw_token),
            reset_password_expires=expires_at,
            reset_password_used=False,
        )
        logger.info("Issued password reset token for user %s (expires %s)", user.id, expires_at.isoformat())

        result = self.mailer.send_password_reset(user.email, self.reset_url(raw_token))
        if not result.ok:
            logger.error(
                "Password reset email to %s failed: %s %s",
                user.email,
                result.code,
                result.detail or "",
            )
            raise DeliveryFailed(result.code)
        return RecoveryOutcome.TOKEN_ISSUED

    def _recovery_target(self, email: str) -> User:
        normalized = (email or "").strip()
        candidates = self.users.find_all_by_email_ci(normalized)
        if not candidates:
            raise AccountNotFound()
        # Several rows can differ only by case; the one typed exactly wins.
        for candidate in candidates:
            if candidate.email == normalized:
                return candidate
        return candidates[0]

    def reset_url(self, raw_token: str) -> str:
        return f"{self.app_url}{RESET_PATH}?{urlencode({'token': raw_token})}"

    def verify_recovery_token(self, token: Optional[str], *, for_update: bool = False) -> User:
        normalized = (token or "").strip()
        if not normalized:
            raise TokenInvalid(TokenInvalidReason.EMPTY_TOKEN)

        digest = hash_token(normalized)
        user = self.users.find_by_reset_token(digest, for_update=for_update)
        if user is None:
            if self.users.find_by_consumed_token(digest) is not None:
                raise TokenInvalid(TokenInvalidReason.TOKEN_ALREADY_USED)
            raise TokenInvalid(TokenInvalidReason.TOKEN_NOT_FOUND)
        if user.reset_password_used:
            raise TokenInvalid(TokenInvalidReason.TOKEN_ALREADY_USED)
        expires_at = user.reset_password_expires
        if expires_at is None or not self.clock() < expires_at:
            raise TokenInvalid(TokenInvalidReason.TOKEN_EXPIRED)
        return user

    def commit_new_password(self, token: Optional[str], new_password: str) -> User:
        user = self.verify_recovery_token(token, for_update=True)
        if len(new_password or "") < self.min_password_length:
            raise PasswordTooShort(self.min_password_length)

        # Hash, consume and clear in one write so the token cannot be replayed.
        self.users.update(
            user,
            password_hash=self.hasher(new_password),
            reset_password_used=True,
            reset_password_token=None,
            reset_password_expires=None,
            reset_password_consumed=hash_token(token.strip()),
        )
        logger.info("Password reset completed for user %s", user.id)
        return user


__all__ = ["CredentialManager", "RecoveryOutcome", "hash_token"]

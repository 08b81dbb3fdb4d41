"""Persistence access for user accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func

from lighthouse.core.users.models import User
from lighthouse.extensions import db

# Columns callers may change through update(); everything else is immutable here.
_UPDATABLE_FIELDS = {
    "name",
    "password_hash",
    "is_admin",
    "last_login",
    "reset_password_token",
    "reset_password_expires",
    "reset_password_used",
    "reset_password_consumed",
}


class UserRepository:
    """Keyed lookups and single-row updates on the users table."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def get(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup returning at most one account."""
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        return (
            self.session.query(User)
            .filter(func.lower(User.email) == normalized)
            .order_by(User.id)
            .first()
        )

    def find_all_by_email_ci(self, email: str) -> list[User]:
        normalized = (email or "").strip().lower()
        if not normalized:
            return []
        return (
            self.session.query(User)
            .filter(func.lower(User.email) == normalized)
            .order_by(User.id)
            .all()
        )

    def find_by_reset_token(self, token_digest: str, *, for_update: bool = False) -> Optional[User]:
        if not token_digest:
            return None
        query = self.session.query(User).filter(User.reset_password_token == token_digest)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by_consumed_token(self, token_digest: str) -> Optional[User]:
        if not token_digest:
            return None
        return self.session.query(User).filter(User.reset_password_consumed == token_digest).first()

    def update(self, user: User, **fields) -> User:
        """Apply all fields to one row and commit them together."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"unknown_fields:{','.join(sorted(unknown))}")
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = datetime.utcnow()
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return user

    def create(self, *, email: str, password_hash: str, name: str | None = None, is_admin: bool = False) -> User:
        user = User(
            email=email.strip(),
            name=name,
            password_hash=password_hash,
            is_admin=is_admin,
        )
        self.session.add(user)
        self.session.commit()
        return user


__all__ = ["UserRepository"]

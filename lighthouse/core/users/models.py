"""Administrative user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.core.utils.models import TimestampMixin
from lighthouse.extensions import db


class User(db.Model, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_reset_password_token", "reset_password_token"),
        db.Index("ix_users_reset_password_consumed", "reset_password_consumed"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(db.String(255))
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(default=False, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(nullable=True)

    # Recovery token fields are overwritten in place; at most one token is live.
    # Tokens are stored as sha256 digests, never in the clear.
    reset_password_token: Mapped[str | None] = mapped_column(db.String(128), nullable=True)
    reset_password_expires: Mapped[datetime | None] = mapped_column(nullable=True)
    reset_password_used: Mapped[bool] = mapped_column(default=False, nullable=False)
    # Digest of the last consumed token, so replays report "already used".
    reset_password_consumed: Mapped[str | None] = mapped_column(db.String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"

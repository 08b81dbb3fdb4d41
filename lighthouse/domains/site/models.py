"""Site-wide settings, content pages and contact messages."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.core.utils.models import TimestampMixin
from lighthouse.extensions import db

PAGE_STATUSES = ("draft", "published")


class SiteSettings(db.Model, TimestampMixin):
    """Single-row table driving the home page sections and footer."""

    __tablename__ = "site_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    hero_title: Mapped[str | None] = mapped_column(db.String(255))
    hero_subtitle: Mapped[str | None] = mapped_column(db.String(500))
    hero_image_url: Mapped[str | None] = mapped_column(db.String(512))
    story_html: Mapped[str | None] = mapped_column(db.Text)
    visit_html: Mapped[str | None] = mapped_column(db.Text)
    schedule_json: Mapped[str | None] = mapped_column(db.Text)
    address: Mapped[str | None] = mapped_column(db.String(500))
    map_embed_url: Mapped[str | None] = mapped_column(db.String(1024))
    footer_html: Mapped[str | None] = mapped_column(db.Text)


class Page(db.Model, TimestampMixin):
    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(primary_key=True)
    slug: Mapped[str] = mapped_column(db.String(120), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(db.Text)
    hero_image_url: Mapped[str | None] = mapped_column(db.String(512))
    status: Mapped[str] = mapped_column(db.String(16), default="draft", nullable=False)
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)


class ContactMessage(db.Model, TimestampMixin):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), nullable=False)
    subject: Mapped[str | None] = mapped_column(db.String(255))
    message: Mapped[str] = mapped_column(db.Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(default=False, nullable=False)

"""Site content service layer."""

from __future__ import annotations

import json
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from lighthouse.domains.menu.models import Category, Product
from lighthouse.domains.site.models import ContactMessage, Page, SiteSettings
from lighthouse.domains.site.schemas import ContactForm, PageForm, SiteSettingsForm
from lighthouse.extensions import db

logger = logging.getLogger(__name__)

DEFAULT_HERO_URL = "/static/images/hero-bg.jpg"
HOME_PAGE_SLUGS = ("inicio", "home")


# --- settings ---


def get_settings() -> Optional[SiteSettings]:
    return SiteSettings.query.order_by(SiteSettings.id).first()


def save_settings(data: SiteSettingsForm, settings_id: Optional[int] = None) -> SiteSettings:
    settings = db.session.get(SiteSettings, settings_id) if settings_id else get_settings()
    if settings is None:
        settings = SiteSettings()
        db.session.add(settings)
    for key, value in data.model_dump().items():
        setattr(settings, key, value)
    db.session.commit()
    return settings


def parse_schedule(settings: Optional[SiteSettings]) -> list[dict]:
    if not settings or not settings.schedule_json:
        return []
    try:
        schedule = json.loads(settings.schedule_json)
    except ValueError:
        logger.warning("Invalid schedule_json in site_settings %s", settings.id)
        return []
    if not isinstance(schedule, dict):
        return []
    return [{"day": day, "hours": hours} for day, hours in schedule.items()]


def resolve_hero(settings: Optional[SiteSettings]) -> tuple[str, Optional[Page]]:
    """Hero image URL and the fallback home page used to find it, if any."""
    if settings and settings.hero_image_url:
        return settings.hero_image_url, None
    for slug in HOME_PAGE_SLUGS:
        page = get_published_page(slug)
        if page:
            return page.hero_image_url or DEFAULT_HERO_URL, page
    return DEFAULT_HERO_URL, None


# --- pages ---


def list_pages() -> list[Page]:
    return Page.query.order_by(Page.sort_order, Page.id).all()


def get_page(page_id: int) -> Optional[Page]:
    return db.session.get(Page, page_id)


def get_published_page(slug: str) -> Optional[Page]:
    return Page.query.filter_by(slug=slug, status="published").first()


def save_page(data: PageForm, page_id: Optional[int] = None) -> Page:
    if page_id:
        page = get_page(page_id)
        if not page:
            raise ValueError("not_found")
    else:
        page = Page()
        db.session.add(page)
    for key, value in data.model_dump().items():
        setattr(page, key, value)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValueError("duplicate")
    return page


def delete_page(page_id: int) -> None:
    page = get_page(page_id)
    if not page:
        raise ValueError("not_found")
    db.session.delete(page)
    db.session.commit()


# --- contact messages ---


def create_contact(data: ContactForm) -> ContactMessage:
    contact = ContactMessage(
        name=data.name,
        email=str(data.email),
        subject=data.subject,
        message=data.message,
        is_read=False,
    )
    db.session.add(contact)
    db.session.commit()
    return contact


def list_contacts() -> list[ContactMessage]:
    return ContactMessage.query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()


def mark_contact_read(contact_id: int) -> ContactMessage:
    contact = db.session.get(ContactMessage, contact_id)
    if not contact:
        raise ValueError("not_found")
    contact.is_read = True
    db.session.commit()
    return contact


def dashboard_counts() -> dict[str, int]:
    return {
        "products": db.session.query(func.count(Product.id)).scalar() or 0,
        "categories": db.session.query(func.count(Category.id)).scalar() or 0,
        "messages": db.session.query(func.count(ContactMessage.id)).filter(ContactMessage.is_read.is_(False)).scalar()
        or 0,
    }

"""Form schemas for site settings, content pages and the contact form."""

from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from lighthouse.domains.site.models import PAGE_STATUSES


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class SiteSettingsForm(BaseModel):
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    hero_image_url: Optional[str] = None
    story_html: Optional[str] = None
    visit_html: Optional[str] = None
    schedule_json: Optional[str] = None
    address: Optional[str] = None
    map_embed_url: Optional[str] = None
    footer_html: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return _blank_to_none(v)

    @field_validator("schedule_json")
    @classmethod
    def validate_schedule(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        try:
            parsed = json.loads(v)
        except ValueError:
            raise ValueError("schedule must be valid JSON")
        if not isinstance(parsed, dict):
            raise ValueError('schedule must map days to hours, e.g. {"Monday": "9-17"}')
        return v


class PageForm(BaseModel):
    slug: str = Field(min_length=1, max_length=120, pattern=r"^[a-z0-9][a-z0-9-]*$")
    title: str = Field(min_length=1, max_length=255)
    content: Optional[str] = None
    hero_image_url: Optional[str] = None
    status: str = "draft"
    sort_order: int = 0

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("content", "hero_image_url", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        v = _blank_to_none(v) or "draft"
        if v not in PAGE_STATUSES:
            raise ValueError("invalid status")
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def default_sort_order(cls, v):
        return 0 if _blank_to_none(v) is None else v


class ContactForm(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    subject: Optional[str] = Field(default=None, max_length=255)
    message: str = Field(min_length=1)

    @field_validator("name", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("subject", mode="before")
    @classmethod
    def blank_subject(cls, v):
        return _blank_to_none(v.strip() if isinstance(v, str) else v)

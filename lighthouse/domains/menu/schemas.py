"""Form schemas for the menu back office."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _checkbox(v) -> bool:
    if isinstance(v, bool):
        return v
    return str(v or "").strip().lower() in ("on", "true", "1", "yes")


class ProductForm(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal
    category_id: Optional[int] = None
    is_featured: bool = False
    is_available: bool = False
    sku: Optional[str] = Field(default=None, max_length=64)
    stock: int = Field(default=0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", "sku", "category_id", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v):
        # Accept "12,50" as typed on Spanish keyboards.
        raw = str(v if v is not None else "").replace(",", ".").strip()
        try:
            price = Decimal(raw)
        except InvalidOperation:
            raise ValueError("price must be a number")
        if not price.is_finite() or price < 0:
            raise ValueError("price must be a positive number")
        return price.quantize(Decimal("0.01"))

    @field_validator("stock", mode="before")
    @classmethod
    def default_stock(cls, v):
        return 0 if _blank_to_none(v) is None else v

    @field_validator("is_featured", "is_available", mode="before")
    @classmethod
    def parse_checkbox(cls, v):
        return _checkbox(v)


class CategoryForm(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: Optional[str] = None
    sort_order: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v):
        return _blank_to_none(v)

    @field_validator("sort_order", mode="before")
    @classmethod
    def default_sort_order(cls, v):
        return 0 if _blank_to_none(v) is None else v

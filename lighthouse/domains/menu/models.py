"""Menu categories and products."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column, relationship

from lighthouse.core.utils.models import TimestampMixin
from lighthouse.extensions import db


class Category(db.Model, TimestampMixin):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)

    products: Mapped[list["Product"]] = relationship("Product", back_populates="category")


class Product(db.Model, TimestampMixin):
    __tablename__ = "products"
    __table_args__ = (db.Index("ix_products_featured_created", "is_featured", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    price: Mapped[Decimal] = mapped_column(db.Numeric(10, 2), nullable=False)
    # Products outlive their category; deleting one leaves them uncategorised.
    category_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    image_url: Mapped[str | None] = mapped_column(db.String(512))
    is_featured: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_available: Mapped[bool] = mapped_column(default=True, nullable=False)
    sku: Mapped[str | None] = mapped_column(db.String(64))
    stock: Mapped[int] = mapped_column(default=0, nullable=False)

    category: Mapped[Category | None] = relationship("Category", back_populates="products")

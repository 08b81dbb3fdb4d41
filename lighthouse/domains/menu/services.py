"""Menu service layer (categories and products)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import joinedload

from lighthouse.domains.menu.models import Category, Product
from lighthouse.domains.menu.schemas import CategoryForm, ProductForm
from lighthouse.extensions import db

FEATURED_LIMIT = 3


# --- categories ---


def list_categories(order_by: str = "sort_order") -> list[Category]:
    column = Category.name if order_by == "name" else Category.sort_order
    return Category.query.order_by(column, Category.id).all()


def get_category(category_id: int) -> Optional[Category]:
    return db.session.get(Category, category_id)


def save_category(data: CategoryForm, category_id: Optional[int] = None) -> Category:
    if category_id:
        category = get_category(category_id)
        if not category:
            raise ValueError("not_found")
    else:
        category = Category()
        db.session.add(category)
    category.name = data.name
    category.description = data.description
    category.sort_order = data.sort_order
    db.session.commit()
    return category


def delete_category(category_id: int) -> None:
    category = get_category(category_id)
    if not category:
        raise ValueError("not_found")
    Product.query.filter_by(category_id=category.id).update({"category_id": None}, synchronize_session=False)
    db.session.delete(category)
    db.session.commit()


# --- products ---


def list_products() -> list[Product]:
    return Product.query.options(joinedload(Product.category)).order_by(Product.name).all()


def get_product(product_id: int) -> Optional[Product]:
    return db.session.get(Product, product_id)


def save_product(data: ProductForm, product_id: Optional[int] = None, *, image_url: Optional[str] = None) -> Product:
    if data.category_id is not None and not get_category(data.category_id):
        raise ValueError("validation_error")
    if product_id:
        product = get_product(product_id)
        if not product:
            raise ValueError("not_found")
    else:
        product = Product()
        db.session.add(product)
    product.name = data.name
    product.description = data.description
    product.price = data.price
    product.category_id = data.category_id
    product.is_featured = data.is_featured
    product.is_available = data.is_available
    product.sku = data.sku
    product.stock = data.stock
    if image_url:
        product.image_url = image_url
    db.session.commit()
    return product


def delete_product(product_id: int) -> None:
    product = get_product(product_id)
    if not product:
        raise ValueError("not_found")
    db.session.delete(product)
    db.session.commit()


def toggle_featured(product_id: int) -> Product:
    product = get_product(product_id)
    if not product:
        raise ValueError("not_found")
    product.is_featured = not product.is_featured
    db.session.commit()
    return product


def featured_products(limit: int = FEATURED_LIMIT) -> list[Product]:
    return (
        Product.query.filter_by(is_featured=True)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


def menu_sections() -> list[dict]:
    """Categories in display order, each with its products sorted by name."""
    categories = list_categories()
    products = Product.query.order_by(Product.name).all()
    by_category: dict[int, list[Product]] = {}
    for product in products:
        if product.category_id is not None:
            by_category.setdefault(product.category_id, []).append(product)
    return [{"category": category, "items": by_category.get(category.id, [])} for category in categories]

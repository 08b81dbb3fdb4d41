from __future__ import annotations

import io
from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from pydantic import ValidationError

from lighthouse.domains.menu import services
from lighthouse.domains.menu.models import Category, Product
from lighthouse.domains.menu.schemas import ProductForm
from lighthouse.extensions import db


@pytest.fixture()
def category(app):
    cat = Category(name="Seafood", sort_order=1)
    db.session.add(cat)
    db.session.commit()
    return cat


def _product(name="Grilled octopus", price="18.50", **extra) -> Product:
    product = Product(name=name, price=Decimal(price), **extra)
    db.session.add(product)
    db.session.commit()
    return product


@pytest.mark.unit
@pytest.mark.parametrize("raw, expected", [("12,5", Decimal("12.50")), ("7", Decimal("7.00")), (" 3.499 ", Decimal("3.50"))])
def test_product_form_parses_price(raw, expected):
    form = ProductForm.model_validate({"name": "Soup", "price": raw})
    assert form.price == expected


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["", "abc", "-1", "NaN"])
def test_product_form_rejects_bad_price(raw):
    with pytest.raises(ValidationError):
        ProductForm.model_validate({"name": "Soup", "price": raw})


@pytest.mark.unit
def test_product_form_checkboxes_and_blanks():
    form = ProductForm.model_validate(
        {"name": " Soup ", "price": "4", "is_featured": "on", "category_id": "", "sku": "", "stock": ""}
    )
    assert form.name == "Soup"
    assert form.is_featured is True
    assert form.is_available is False
    assert form.category_id is None
    assert form.sku is None
    assert form.stock == 0


def test_create_product(admin_client, category):
    resp = admin_client.post(
        "/admin/products/save",
        data={
            "name": "Sea bass",
            "price": "21,90",
            "category_id": str(category.id),
            "is_available": "on",
            "stock": "5",
        },
    )

    assert resp.headers["Location"].endswith("/admin/products")
    product = Product.query.filter_by(name="Sea bass").one()
    assert product.price == Decimal("21.90")
    assert product.category_id == category.id
    assert product.is_available is True
    assert product.is_featured is False


def test_create_product_with_image(admin_client, app):
    resp = admin_client.post(
        "/admin/products/save",
        data={"name": "Paella", "price": "25", "image": (io.BytesIO(b"fake-jpeg"), "paella.jpg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 302
    product = Product.query.filter_by(name="Paella").one()
    assert product.image_url.startswith("/media/products/")
    assert product.image_url.endswith("_paella.jpg")
    listed = app.extensions["media_storage"].list_folder("products")
    assert [f["url"] for f in listed.files] == [product.image_url]


def test_update_product_keeps_image_when_none_uploaded(admin_client):
    product = _product(image_url="/media/products/1_old.jpg")

    admin_client.post(
        "/admin/products/save",
        data={"id": str(product.id), "name": "Octopus", "price": "19"},
    )

    db.session.expire_all()
    updated = db.session.get(Product, product.id)
    assert updated.name == "Octopus"
    assert updated.image_url == "/media/products/1_old.jpg"


def test_invalid_product_is_not_saved(admin_client):
    resp = admin_client.post(
        "/admin/products/save", data={"name": "", "price": "abc"}, follow_redirects=True
    )

    assert resp.request.path == "/admin/products/add"
    assert b"is required" in resp.data or b"Price" in resp.data
    assert Product.query.count() == 0


def test_unknown_category_is_rejected(admin_client):
    resp = admin_client.post("/admin/products/save", data={"name": "Soup", "price": "4", "category_id": "999"})
    assert resp.headers["Location"].endswith("/admin/products/add")
    assert Product.query.count() == 0


def test_toggle_featured(admin_client):
    product = _product()

    admin_client.post(f"/admin/products/toggle-featured/{product.id}")
    db.session.expire_all()
    assert db.session.get(Product, product.id).is_featured is True

    admin_client.post(f"/admin/products/toggle-featured/{product.id}")
    db.session.expire_all()
    assert db.session.get(Product, product.id).is_featured is False


def test_delete_product(admin_client):
    product = _product()

    admin_client.post(f"/admin/products/delete/{product.id}")

    assert Product.query.count() == 0


def test_delete_missing_product_flashes(admin_client):
    resp = admin_client.post("/admin/products/delete/404", follow_redirects=True)
    assert b"Product not found." in resp.data


def test_products_page_lists_category_names(admin_client, category):
    _product(category_id=category.id)

    resp = admin_client.get("/admin/products")

    assert resp.status_code == 200
    assert b"Grilled octopus" in resp.data
    assert b"Seafood" in resp.data


def test_category_crud(admin_client):
    admin_client.post("/admin/categories/save", data={"name": " Desserts ", "sort_order": "3"})
    category = Category.query.one()
    assert category.name == "Desserts"
    assert category.sort_order == 3

    admin_client.post(
        "/admin/categories/save", data={"id": str(category.id), "name": "Sweets", "sort_order": ""}
    )
    db.session.expire_all()
    assert db.session.get(Category, category.id).name == "Sweets"

    resp = admin_client.post("/admin/categories/save", data={"name": ""}, follow_redirects=True)
    assert b"Name is required." in resp.data
    assert Category.query.count() == 1


def test_deleting_category_keeps_products(admin_client, category):
    product = _product(category_id=category.id)

    admin_client.post(f"/admin/categories/delete/{category.id}")

    db.session.expire_all()
    assert Category.query.count() == 0
    assert db.session.get(Product, product.id).category_id is None


def test_featured_products_newest_first_limited_to_three(app):
    for index in range(5):
        _product(name=f"Dish {index}", is_featured=True)
    _product(name="Not featured")

    names = [product.name for product in services.featured_products()]

    assert names == ["Dish 4", "Dish 3", "Dish 2"]


def test_menu_sections_order(app):
    mains = Category(name="Mains", sort_order=2)
    starters = Category(name="Starters", sort_order=1)
    db.session.add_all([mains, starters])
    db.session.commit()
    _product(name="Zucchini fritters", category_id=starters.id)
    _product(name="Anchovies", category_id=starters.id)
    _product(name="Lobster", category_id=mains.id)

    sections = services.menu_sections()

    assert [section["category"].name for section in sections] == ["Starters", "Mains"]
    assert [item.name for item in sections[0]["items"]] == ["Anchovies", "Zucchini fritters"]

"""Back-office product and category management."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from lighthouse.core.auth.access import admin_required
from lighthouse.core.utils.decorators import csrf_protected
from lighthouse.core.utils.validation import first_error_message
from lighthouse.domains.menu import services
from lighthouse.domains.menu.schemas import CategoryForm, ProductForm

logger = logging.getLogger(__name__)

menu_admin_bp = Blueprint("menu_admin", __name__)

PRODUCT_LABELS = {"name": "Name", "price": "Price", "stock": "Stock", "category_id": "Category"}


# --- products ---


@menu_admin_bp.get("/products")
@admin_required
def products():
    return render_template("admin/products/index.html", title="Products", products=services.list_products())


@menu_admin_bp.get("/products/add")
@admin_required
def new_product():
    return render_template(
        "admin/products/form.html",
        title="New product",
        product=None,
        categories=services.list_categories(order_by="name"),
    )


@menu_admin_bp.get("/products/edit/<int:product_id>")
@admin_required
def edit_product(product_id: int):
    product = services.get_product(product_id)
    if not product:
        flash("Product not found.", "error")
        return redirect(url_for("menu_admin.products"))
    return render_template(
        "admin/products/form.html",
        title="Edit product",
        product=product,
        categories=services.list_categories(order_by="name"),
    )


@menu_admin_bp.post("/products/save")
@admin_required
@csrf_protected
def save_product():
    product_id = request.form.get("id", type=int)
    back = url_for("menu_admin.edit_product", product_id=product_id) if product_id else url_for("menu_admin.new_product")
    try:
        form = ProductForm.model_validate(request.form.to_dict())
    except ValidationError as exc:
        flash(first_error_message(exc, PRODUCT_LABELS), "error")
        return redirect(back)

    image_url = None
    upload = request.files.get("image")
    if upload and upload.filename:
        stored = current_app.extensions["media_storage"].upload_image(upload, "products")
        if not stored.ok:
            flash(f"Could not upload the image: {stored.error}", "error")
            return redirect(back)
        image_url = stored.url

    try:
        product = services.save_product(form, product_id, image_url=image_url)
    except ValueError as exc:
        if str(exc) == "not_found":
            flash("Product not found.", "error")
            return redirect(url_for("menu_admin.products"))
        flash("The selected category does not exist.", "error")
        return redirect(back)
    except SQLAlchemyError:
        logger.exception("Could not save product")
        flash("Could not save the product.", "error")
        return redirect(back)
    flash(f"Product {product.name} saved.", "success")
    return redirect(url_for("menu_admin.products"))


@menu_admin_bp.post("/products/delete/<int:product_id>")
@admin_required
@csrf_protected
def delete_product(product_id: int):
    try:
        services.delete_product(product_id)
    except ValueError:
        flash("Product not found.", "error")
        return redirect(url_for("menu_admin.products"))
    flash("Product deleted.", "success")
    return redirect(url_for("menu_admin.products"))


@menu_admin_bp.post("/products/toggle-featured/<int:product_id>")
@admin_required
@csrf_protected
def toggle_featured(product_id: int):
    try:
        product = services.toggle_featured(product_id)
    except ValueError:
        flash("Could not change the featured state.", "error")
        return redirect(url_for("menu_admin.products"))
    state = "marked as featured" if product.is_featured else "removed from featured"
    flash(f"Product {state}.", "success")
    return redirect(url_for("menu_admin.products"))


# --- categories ---


@menu_admin_bp.get("/categories")
@admin_required
def categories():
    return render_template("admin/categories/index.html", title="Categories", categories=services.list_categories())


@menu_admin_bp.get("/categories/add")
@admin_required
def new_category():
    return render_template("admin/categories/form.html", title="New category", category=None)


@menu_admin_bp.get("/categories/edit/<int:category_id>")
@admin_required
def edit_category(category_id: int):
    category = services.get_category(category_id)
    if not category:
        flash("Category not found.", "error")
        return redirect(url_for("menu_admin.categories"))
    return render_template("admin/categories/form.html", title="Edit category", category=category)


@menu_admin_bp.post("/categories/save")
@admin_required
@csrf_protected
def save_category():
    category_id = request.form.get("id", type=int)
    back = (
        url_for("menu_admin.edit_category", category_id=category_id)
        if category_id
        else url_for("menu_admin.new_category")
    )
    try:
        form = CategoryForm.model_validate(request.form.to_dict())
    except ValidationError as exc:
        flash(first_error_message(exc), "error")
        return redirect(back)
    try:
        services.save_category(form, category_id)
    except ValueError:
        flash("Category not found.", "error")
        return redirect(url_for("menu_admin.categories"))
    flash("Category saved.", "success")
    return redirect(url_for("menu_admin.categories"))


@menu_admin_bp.post("/categories/delete/<int:category_id>")
@admin_required
@csrf_protected
def delete_category(category_id: int):
    try:
        services.delete_category(category_id)
    except ValueError:
        flash("Category not found.", "error")
        return redirect(url_for("menu_admin.categories"))
    flash("Category deleted.", "success")
    return redirect(url_for("menu_admin.categories"))

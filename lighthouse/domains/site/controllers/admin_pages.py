"""Back-office dashboard, site settings, content pages and contact inbox."""

from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from lighthouse.core.auth.access import admin_required
from lighthouse.core.utils.decorators import csrf_protected
from lighthouse.core.utils.validation import first_error_message
from lighthouse.domains.site import services
from lighthouse.domains.site.models import PAGE_STATUSES
from lighthouse.domains.site.schemas import PageForm, SiteSettingsForm

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("")
@admin_bp.get("/")
@admin_required
def dashboard():
    try:
        counts = services.dashboard_counts()
    except SQLAlchemyError:
        logger.exception("Could not load dashboard counts")
        counts = {"products": 0, "categories": 0, "messages": 0}
    return render_template("admin/dashboard.html", title="Dashboard", counts=counts)


# --- settings ---


@admin_bp.get("/settings")
@admin_required
def settings():
    return render_template("admin/settings.html", title="Site settings", settings=services.get_settings())


@admin_bp.post("/settings")
@admin_required
@csrf_protected
def save_settings():
    try:
        form = SiteSettingsForm.model_validate(request.form.to_dict())
    except ValidationError as exc:
        flash(first_error_message(exc), "error")
        return redirect(url_for("admin.settings"))
    settings_id = request.form.get("id", type=int)
    try:
        services.save_settings(form, settings_id)
    except SQLAlchemyError:
        logger.exception("Could not save site settings")
        flash("Could not save the settings.", "error")
        return redirect(url_for("admin.settings"))
    flash("Settings saved.", "success")
    return redirect(url_for("admin.settings"))


# --- pages ---


@admin_bp.get("/pages")
@admin_required
def pages():
    return render_template("admin/pages/index.html", title="Pages", pages=services.list_pages())


@admin_bp.get("/pages/add")
@admin_required
def new_page():
    return render_template("admin/pages/form.html", title="New page", page=None, statuses=PAGE_STATUSES)


@admin_bp.get("/pages/edit/<int:page_id>")
@admin_required
def edit_page(page_id: int):
    page = services.get_page(page_id)
    if not page:
        flash("Page not found.", "error")
        return redirect(url_for("admin.pages"))
    return render_template("admin/pages/form.html", title="Edit page", page=page, statuses=PAGE_STATUSES)


@admin_bp.post("/pages/save")
@admin_required
@csrf_protected
def save_page():
    page_id = request.form.get("id", type=int)
    back = url_for("admin.edit_page", page_id=page_id) if page_id else url_for("admin.new_page")
    try:
        form = PageForm.model_validate(request.form.to_dict())
    except ValidationError as exc:
        flash(first_error_message(exc), "error")
        return redirect(back)
    try:
        services.save_page(form, page_id)
    except ValueError as exc:
        code = str(exc)
        if code == "duplicate":
            flash("Another page already uses that slug.", "error")
            return redirect(back)
        flash("Page not found.", "error")
        return redirect(url_for("admin.pages"))
    flash("Page saved.", "success")
    return redirect(url_for("admin.pages"))


@admin_bp.post("/pages/delete/<int:page_id>")
@admin_required
@csrf_protected
def delete_page(page_id: int):
    try:
        services.delete_page(page_id)
    except ValueError:
        flash("Page not found.", "error")
        return redirect(url_for("admin.pages"))
    flash("Page deleted.", "success")
    return redirect(url_for("admin.pages"))


# --- contact messages ---


@admin_bp.get("/messages")
@admin_required
def messages():
    return render_template("admin/messages.html", title="Messages", messages=services.list_contacts())


@admin_bp.post("/messages/<int:message_id>/read")
@admin_required
@csrf_protected
def mark_message_read(message_id: int):
    try:
        services.mark_contact_read(message_id)
    except ValueError:
        flash("Message not found.", "error")
    return redirect(url_for("admin.messages"))

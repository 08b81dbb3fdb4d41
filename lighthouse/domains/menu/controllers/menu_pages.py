"""Public menu page."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from sqlalchemy.exc import SQLAlchemyError

from lighthouse.domains.menu import services

logger = logging.getLogger(__name__)

menu_bp = Blueprint("menu", __name__)


@menu_bp.get("/menu")
def show_menu():
    try:
        sections = services.menu_sections()
    except SQLAlchemyError:
        logger.exception("Could not load menu")
        flash("Could not load the menu. Please try again.", "error")
        return redirect(url_for("site.home"))
    listed = current_app.extensions["media_storage"].list_folder("menu")
    return render_template(
        "site/menu.html",
        title="Menu",
        sections=sections,
        menu_images=listed.files if listed.ok else [],
    )

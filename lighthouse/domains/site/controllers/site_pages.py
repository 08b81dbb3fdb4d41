"""Public website pages."""

from __future__ import annotations

import logging

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for
from markupsafe import escape
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from lighthouse.core.utils.validation import first_error_message
from lighthouse.domains.menu import services as menu_services
from lighthouse.domains.site import services
from lighthouse.domains.site.schemas import ContactForm

logger = logging.getLogger(__name__)

site_bp = Blueprint("site", __name__)

CONTACT_ANCHOR = "contacto"


@site_bp.get("/")
def home():
    try:
        featured = menu_services.featured_products()
        settings = services.get_settings()
        hero_url, home_page = services.resolve_hero(settings)
    except SQLAlchemyError:
        logger.exception("Could not load home page content")
        featured, settings, home_page = [], None, None
        hero_url = services.DEFAULT_HERO_URL
    return render_template(
        "site/index.html",
        title="Home",
        featured_products=featured,
        settings=settings,
        home_page=home_page,
        hero_url=hero_url,
        schedule=services.parse_schedule(settings),
    )


@site_bp.get("/about")
def about():
    return render_template("site/about.html", title="About us")


@site_bp.route("/contact", methods=["GET", "POST"])
def contact():
    home_anchor = url_for("site.home", _anchor=CONTACT_ANCHOR)
    if request.method == "GET":
        return redirect(home_anchor)

    try:
        form = ContactForm.model_validate(request.form.to_dict())
    except ValidationError as exc:
        flash(first_error_message(exc), "error")
        return redirect(home_anchor)

    try:
        services.create_contact(form)
    except SQLAlchemyError:
        logger.exception("Could not store contact message")
        flash("There was an error sending your message. Please try again.", "error")
        return redirect(home_anchor)

    _notify_owner(form)
    flash("Thanks for your message! We will get back to you soon.", "success")
    return redirect(home_anchor)


def _notify_owner(form: ContactForm) -> None:
    recipient = current_app.config.get("CONTACT_NOTIFY_EMAIL")
    if not recipient:
        return
    subject = f"[Lighthouse] {form.subject}" if form.subject else "[Lighthouse] New contact message"
    text = f"Name: {form.name}\nEmail: {form.email}\n\n{form.message}"
    html = (
        f"<p><strong>Name:</strong> {escape(form.name)}</p>"
        f"<p><strong>Email:</strong> {escape(str(form.email))}</p>"
        f"<p><strong>Message:</strong></p><p>{escape(form.message)}</p>"
    ).replace("\n", "<br>")
    result = current_app.extensions["mailer"].send(
        recipient, subject, html=html, text=text, reply_to=str(form.email)
    )
    if not result.ok:
        logger.warning("Contact notification not sent: %s", result.code)


@site_bp.get("/p/<slug>")
def page(slug: str):
    content_page = services.get_published_page(slug)
    if content_page is None:
        abort(404)
    return render_template("site/page.html", title=content_page.title, page=content_page)

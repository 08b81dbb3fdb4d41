"""Media manager pages and public file serving."""

from __future__ import annotations

import logging

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, send_file, url_for

from lighthouse.core.auth.access import admin_required
from lighthouse.core.utils.decorators import csrf_protected
from lighthouse.domains.media.storage import MediaStorage, display_name

logger = logging.getLogger(__name__)

media_bp = Blueprint("media", __name__)
media_admin_bp = Blueprint("media_admin", __name__)

MEDIA_FOLDERS = ("hero", "menu", "products")
MENU_FOLDER = "menu"


def _storage() -> MediaStorage:
    return current_app.extensions["media_storage"]


@media_bp.get("/media/<path:path>")
def serve(path: str):
    target = _storage().resolve(path)
    if target is None or not target.is_file():
        abort(404)
    return send_file(target, max_age=86400)


# --- media manager ---


@media_admin_bp.get("/media")
@admin_required
def media():
    storage = _storage()
    ensured = storage.ensure_bucket()
    if not ensured.ok:
        flash("Could not load the media manager.", "error")
        return redirect(url_for("admin.dashboard"))
    folders = {}
    for folder in MEDIA_FOLDERS:
        listed = storage.list_folder(folder)
        folders[folder] = listed.files if listed.ok else []
    return render_template("admin/media.html", title="Media", folders=folders)


@media_admin_bp.post("/media/upload")
@admin_required
@csrf_protected
def upload_media():
    folder = request.form.get("folder") or "products"
    if folder not in MEDIA_FOLDERS:
        flash("Unknown media folder.", "error")
        return redirect(url_for("media_admin.media"))
    upload = request.files.get("file")
    if not upload or not upload.filename:
        flash("Please choose a file.", "error")
        return redirect(url_for("media_admin.media"))
    result = _storage().upload_image(upload, folder)
    if not result.ok:
        flash(f"Upload failed: {result.error}", "error")
    else:
        flash("File uploaded.", "success")
    return redirect(url_for("media_admin.media"))


@media_admin_bp.post("/media/delete")
@admin_required
@csrf_protected
def delete_media():
    path = request.form.get("path") or ""
    if not path:
        flash("No file path given.", "error")
        return redirect(url_for("media_admin.media"))
    result = _storage().delete_file(path)
    if not result.ok:
        flash(f"Could not delete: {result.error}", "error")
    else:
        flash("File deleted.", "success")
    return redirect(url_for("media_admin.media"))


# --- menu images ---


@media_admin_bp.get("/menu-images")
@admin_required
def menu_images():
    storage = _storage()
    storage.ensure_bucket()
    listed = storage.list_folder(MENU_FOLDER)
    if not listed.ok:
        flash("Could not load the menu images.", "error")
        return redirect(url_for("admin.dashboard"))
    images = [dict(item, label=display_name(item["name"])) for item in listed.files]
    return render_template("admin/menu_images.html", title="Menu images", images=images)


@media_admin_bp.post("/menu-images/upload")
@admin_required
@csrf_protected
def upload_menu_image():
    upload = request.files.get("image")
    if not upload or not upload.filename:
        flash("Please choose an image.", "error")
        return redirect(url_for("media_admin.menu_images"))
    result = _storage().upload_image(upload, MENU_FOLDER)
    if not result.ok:
        flash(f"Upload failed: {result.error}", "error")
    else:
        flash("Menu image uploaded.", "success")
    return redirect(url_for("media_admin.menu_images"))


@media_admin_bp.post("/menu-images/delete")
@admin_required
@csrf_protected
def delete_menu_image():
    path = request.form.get("path") or ""
    if not path.startswith(f"{MENU_FOLDER}/"):
        flash("Invalid image path.", "error")
        return redirect(url_for("media_admin.menu_images"))
    result = _storage().delete_file(path)
    if not result.ok:
        flash(f"Could not delete: {result.error}", "error")
    else:
        flash("Image deleted.", "success")
    return redirect(url_for("media_admin.menu_images"))

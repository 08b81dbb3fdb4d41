"""Lighthouse Restaurant application factory."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask, has_request_context, render_template
from werkzeug.exceptions import HTTPException

from lighthouse.config import config_by_name
from lighthouse.core.auth.access import AccessGate
from lighthouse.core.auth.credentials import CredentialManager
from lighthouse.core.auth.csrf import generate_csrf_token
from lighthouse.core.auth.session_store import FlaskSessionStore
from lighthouse.core.mail.mailer import Mailer
from lighthouse.core.schema.contract import verify_schema
from lighthouse.core.users.repository import UserRepository
from lighthouse.domains.media.storage import MediaStorage
from lighthouse.extensions import db, init_extensions, mail


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Lighthouse Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        static_folder=str(Path(__file__).parent / "static"),
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    instance_root.mkdir(parents=True, exist_ok=True)
    uploads_path = Path(app.config.get("UPLOAD_FOLDER", "instance/uploads"))
    if not uploads_path.is_absolute():
        uploads_path = project_root / uploads_path
    uploads_path.mkdir(parents=True, exist_ok=True)
    app.config["UPLOAD_FOLDER"] = str(uploads_path)

    # Relative sqlite paths resolve against the project root, not the cwd.
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////"):
        db_path = project_root / db_uri.replace("sqlite:///", "", 1)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _register_services(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_template_helpers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from lighthouse.scripts.commands import register_commands

    register_commands(app)

    return app


def enforce_schema_contract(app: Flask) -> None:
    """Refuse to serve when the database lags behind the models.

    Called by the WSGI entrypoint rather than create_app so that
    ``flask db upgrade`` can still build an app against an old schema.
    """
    if not app.config.get("SCHEMA_CHECK_ON_STARTUP"):
        return
    with app.app_context():
        report = verify_schema(db.engine)
    app.logger.info("Schema contract satisfied (revision %s)", report.revision or "unversioned")


def _register_services(app: Flask) -> None:
    """Build the auth and storage collaborators once and share them via app.extensions."""
    session_store = FlaskSessionStore()
    mailer = Mailer.from_app(app, mail)
    app.extensions["session_store"] = session_store
    app.extensions["access_gate"] = AccessGate(session_store)
    app.extensions["mailer"] = mailer
    app.extensions["credentials"] = CredentialManager(
        UserRepository(),
        mailer,
        app_url=app.config["APP_URL"],
        token_ttl_seconds=app.config["RESET_TOKEN_TTL_SECONDS"],
        min_password_length=app.config["PASSWORD_MIN_LENGTH"],
    )
    app.extensions["media_storage"] = MediaStorage.from_app(app)


def _register_blueprints(app: Flask) -> None:
    from lighthouse.core.auth.controllers import auth_bp, legacy_auth_bp  # local import to avoid circulars
    from lighthouse.domains.media.controllers.media_pages import media_admin_bp, media_bp
    from lighthouse.domains.menu.controllers.admin_pages import menu_admin_bp
    from lighthouse.domains.menu.controllers.menu_pages import menu_bp
    from lighthouse.domains.site.controllers.admin_pages import admin_bp
    from lighthouse.domains.site.controllers.site_pages import site_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(legacy_auth_bp)
    app.register_blueprint(site_bp)
    app.register_blueprint(menu_bp)
    app.register_blueprint(media_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(menu_admin_bp, url_prefix="/admin")
    app.register_blueprint(media_admin_bp, url_prefix="/admin")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def _not_found(exc):
        return render_template("errors/404.html", title="Page not found"), 404

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error: %s", exc)
        return render_template("errors/500.html", title="Server error"), 500


def _register_template_helpers(app: Flask) -> None:
    @app.context_processor
    def inject_globals():
        # Emails can be rendered from CLI commands, where there is no session.
        if not has_request_context():
            return {"current_year": datetime.utcnow().year}
        return {
            "csrf_token": generate_csrf_token,
            "current_user": app.extensions["session_store"].get_user(),
            "current_year": datetime.utcnow().year,
        }

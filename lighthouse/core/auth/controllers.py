"""Sign-in, sign-out and password recovery pages."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from lighthouse.core.auth.access import anonymous_required
from lighthouse.core.auth.credentials import CredentialManager
from lighthouse.core.auth.errors import (
    DeliveryFailed,
    InvalidCredentials,
    PasswordMismatch,
    PasswordTooShort,
    TokenInvalid,
)
from lighthouse.core.auth.schemas import ForgotPasswordForm, LoginForm, ResetPasswordForm
from lighthouse.core.auth.session_store import SessionStore
from lighthouse.core.utils.decorators import csrf_protected
from lighthouse.extensions import limiter

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)
legacy_auth_bp = Blueprint("legacy_auth", __name__)

RECOVERY_SENT_NOTICE = "If the address belongs to an account, you will receive a link to reset your password."
GENERIC_FAILURE_NOTICE = "An error occurred while processing your request."


def _credentials() -> CredentialManager:
    return current_app.extensions["credentials"]


def _sessions() -> SessionStore:
    return current_app.extensions["session_store"]


def _reset_form_redirect(token: str):
    return redirect(url_for("auth.reset_password", token=token))


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("10/minute", methods=["POST"])
@anonymous_required
@csrf_protected
def login():
    if request.method == "GET":
        return render_template("auth/login.html", title="Sign in")

    try:
        form = LoginForm.model_validate(request.form.to_dict())
    except ValidationError:
        flash("Please enter your email and password.", "error")
        return redirect(url_for("auth.login"))

    try:
        user = _credentials().verify_credentials(form.email, form.password)
    except InvalidCredentials as exc:
        flash(exc.message, "error")
        return redirect(url_for("auth.login"))
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        flash("Could not sign you in. Please try again.", "error")
        return redirect(url_for("auth.login"))

    if not user.is_admin:
        logger.info("Non-admin %s refused back-office access", user.email)
        flash("You do not have permission to access the admin panel.", "error")
        return redirect(url_for("site.home"))

    _sessions().set_user(user)
    logger.info("Login successful for %s", user.email)
    return redirect(url_for("admin.dashboard"))


@auth_bp.get("/logout")
def logout():
    _sessions().destroy()
    flash("You have been signed out.", "success")
    return redirect(url_for("auth.login"))


@auth_bp.route("/forgot-password", methods=["GET", "POST"])
@limiter.limit("5/minute", methods=["POST"])
@anonymous_required
@csrf_protected
def forgot_password():
    if request.method == "GET":
        return render_template("auth/forgot_password.html", title="Forgot your password?")

    try:
        form = ForgotPasswordForm.model_validate(request.form.to_dict())
    except ValidationError:
        flash("Please enter a valid email address.", "error")
        return redirect(url_for("auth.forgot_password"))

    try:
        _credentials().request_password_recovery(form.email)
    except DeliveryFailed as exc:
        flash(exc.message, "error")
        return redirect(url_for("auth.forgot_password"))
    except SQLAlchemyError:
        logger.exception("Password recovery request failed")
        flash(GENERIC_FAILURE_NOTICE, "error")
        return redirect(url_for("auth.forgot_password"))

    flash(RECOVERY_SENT_NOTICE, "success")
    return redirect(url_for("auth.forgot_password"))


@auth_bp.route("/reset-password", methods=["GET", "POST"])
@limiter.limit("5/minute", methods=["POST"])
@anonymous_required
@csrf_protected
def reset_password():
    if request.method == "GET":
        token = request.args.get("token", "")
        try:
            _credentials().verify_recovery_token(token)
        except TokenInvalid as exc:
            flash(exc.message, "error")
            return redirect(url_for("auth.forgot_password"))
        return render_template("auth/reset_password.html", title="Reset password", token=token)

    token = (request.form.get("token") or "").strip()
    if not token:
        flash("The reset token was not provided.", "error")
        return redirect(url_for("auth.forgot_password"))

    try:
        form = ResetPasswordForm.model_validate(request.form.to_dict())
        form.check_confirmation()
    except ValidationError:
        flash("Please complete all fields.", "error")
        return _reset_form_redirect(token)
    except PasswordMismatch as exc:
        flash(exc.message, "error")
        return _reset_form_redirect(token)

    try:
        _credentials().commit_new_password(form.token, form.password)
    except TokenInvalid as exc:
        flash(exc.message, "error")
        return redirect(url_for("auth.forgot_password"))
    except PasswordTooShort as exc:
        flash(exc.message, "error")
        return _reset_form_redirect(token)
    except SQLAlchemyError:
        logger.exception("Password update failed")
        flash("Could not update the password.", "error")
        return _reset_form_redirect(token)

    flash("Your password has been updated. You can now sign in with your new password.", "success")
    return redirect(url_for("auth.login"))


# Old links still circulate in sent emails and bookmarks.


@legacy_auth_bp.get("/forgot-password")
def legacy_forgot_password():
    return redirect(url_for("auth.forgot_password"))


@legacy_auth_bp.get("/reset-password")
def legacy_reset_password():
    token = request.args.get("token")
    if token:
        return redirect(url_for("auth.reset_password", token=token))
    return redirect(url_for("auth.forgot_password"))


@legacy_auth_bp.get("/admin/login")
def legacy_admin_login():
    return redirect(url_for("auth.login"))

"""Create or repair an administrative account.

Usage:
    flask ensure-admin admin@example.com 'new-password' --name "Owner"
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from lighthouse.core.auth.password import hash_password
from lighthouse.core.users.models import User
from lighthouse.core.users.repository import UserRepository


def ensure_admin(email: str, password: str, name: str | None = None) -> tuple[User, bool]:
    """Return the admin account for ``email`` and whether it was created."""
    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 8)
    if len(password) < min_length:
        raise click.BadParameter(f"password must be at least {min_length} characters")

    users = UserRepository()
    user = users.find_by_email(email)
    if user is None:
        user = users.create(email=email, password_hash=hash_password(password), name=name, is_admin=True)
        return user, True

    fields = {"password_hash": hash_password(password), "is_admin": True}
    if name:
        fields["name"] = name
    users.update(user, **fields)
    return user, False


@click.command("ensure-admin")
@click.argument("email")
@click.argument("password")
@click.option("--name", default=None, help="Display name")
@with_appcontext
def ensure_admin_command(email: str, password: str, name: str | None):
    """Create the admin account, or reset its password and admin flag."""
    user, created = ensure_admin(email, password, name)
    action = "Created" if created else "Updated"
    click.echo(f"{action} admin user {user.email} (id={user.id})")

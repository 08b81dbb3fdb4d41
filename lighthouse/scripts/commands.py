"""Registers the maintenance commands on ``flask``."""

from __future__ import annotations


def register_commands(app):
    """Register CLI commands with the app."""
    from lighthouse.scripts.check_schema import check_schema_command
    from lighthouse.scripts.check_user_password import check_user_password_command
    from lighthouse.scripts.ensure_admin import ensure_admin_command
    from lighthouse.scripts.send_test_email import send_test_email_command

    app.cli.add_command(ensure_admin_command)
    app.cli.add_command(check_user_password_command)
    app.cli.add_command(send_test_email_command)
    app.cli.add_command(check_schema_command)

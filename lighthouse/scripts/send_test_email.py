"""Send a one-off message to check the SMTP settings.

Usage:
    flask send-test-email --to someone@example.com
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext


@click.command("send-test-email")
@click.option("--to", "recipient", required=True, help="Recipient address")
@with_appcontext
def send_test_email_command(recipient: str):
    """Deliver a plain test message through the configured transport."""
    mailer = current_app.extensions["mailer"]
    result = mailer.send(
        recipient,
        "Lighthouse test email",
        text="If you are reading this, outgoing email is configured correctly.",
    )
    if not result.ok:
        click.echo(f"Delivery failed: {result.code} {result.detail or ''}".rstrip(), err=True)
        raise click.Abort()
    click.echo(f"Test email sent to {recipient}")

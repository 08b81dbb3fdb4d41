from __future__ import annotations

import smtplib

import pytest

pytestmark = pytest.mark.integration

from lighthouse.core.mail.mailer import PASSWORD_RESET_SUBJECT, Mailer
from lighthouse.extensions import mail

SENDER = ("Lighthouse Restaurant", "no-reply@lighthouse.test")


class RaisingTransport:
    def __init__(self, exc: Exception):
        self.exc = exc

    def send(self, message):
        raise self.exc


def test_password_reset_email_contains_link(app):
    mailer = Mailer(mail, sender=SENDER)
    url = "http://testserver/auth/reset-password?token=abc123"

    with mail.record_messages() as outbox:
        result = mailer.send_password_reset("owner@x.com", url)

    assert result.ok
    assert len(outbox) == 1
    message = outbox[0]
    assert message.subject == PASSWORD_RESET_SUBJECT
    assert message.recipients == ["owner@x.com"]
    assert url in message.html
    assert url in message.body


def test_reply_to_is_passed_through(app):
    mailer = Mailer(mail, sender=SENDER)

    with mail.record_messages() as outbox:
        mailer.send("owner@x.com", "Hello", text="hi", reply_to="guest@x.com")

    assert outbox[0].reply_to == "guest@x.com"


def test_unconfigured_transport_refuses(app):
    mailer = Mailer(mail, sender=SENDER, configured=False)

    result = mailer.send("owner@x.com", "Hello", text="hi")

    assert not result.ok
    assert result.code == "not_configured"


@pytest.mark.parametrize(
    "exc, code",
    [
        (smtplib.SMTPAuthenticationError(535, b"5.7.8 bad credentials"), "smtp_auth"),
        (smtplib.SMTPDataError(554, b"rejected"), "smtp_error"),
        (smtplib.SMTPServerDisconnected("gone"), "smtp_error"),
        (ConnectionRefusedError(111, "refused"), "connection_error"),
    ],
)
def test_transport_errors_map_to_codes(app, exc, code):
    mailer = Mailer(RaisingTransport(exc), sender=SENDER)

    result = mailer.send("owner@x.com", "Hello", text="hi")

    assert not result.ok
    assert result.code == code


def test_from_app_requires_credentials_outside_tests(app):
    app.config["MAIL_SUPPRESS_SEND"] = False
    app.config["MAIL_USERNAME"] = None

    assert Mailer.from_app(app, mail).configured is False

    app.config["MAIL_USERNAME"] = "owner@x.com"
    app.config["MAIL_PASSWORD"] = "app-password"
    assert Mailer.from_app(app, mail).configured is True

"""Outbound email over SMTP (Flask-Mail)."""

from __future__ import annotations

import logging
import smtplib
import socket
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import render_template
from flask_mail import Mail, Message

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Reset your password - Lighthouse Restaurant"


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    code: Optional[str] = None
    detail: Optional[str] = None


class Mailer:
    """Send messages through a configured Flask-Mail instance.

    ``send`` never raises for transport problems; it maps them to a
    ``DeliveryResult`` with a short diagnostic code so callers decide
    whether delivery is best-effort or required.
    """

    def __init__(self, mail: Mail, *, sender, configured: bool = True):
        self.mail = mail
        self.sender = sender
        self.configured = configured

    @classmethod
    def from_app(cls, app, mail: Mail) -> "Mailer":
        cfg = app.config
        has_credentials = bool(cfg.get("MAIL_USERNAME") and cfg.get("MAIL_PASSWORD"))
        configured = bool(cfg.get("MAIL_SERVER")) and (has_credentials or cfg.get("MAIL_SUPPRESS_SEND", False))
        if not configured:
            app.logger.warning("Mail transport not configured (EMAIL_USER/EMAIL_PASSWORD missing)")
        return cls(mail, sender=cfg.get("MAIL_DEFAULT_SENDER"), configured=configured)

    def send(
        self,
        to: str,
        subject: str,
        *,
        html: Optional[str] = None,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> DeliveryResult:
        if not self.configured:
            return DeliveryResult(ok=False, code="not_configured", detail="mail transport is not configured")

        message = Message(
            subject=subject,
            recipients=[to],
            html=html,
            body=text,
            sender=self.sender,
            reply_to=reply_to,
        )
        try:
            self.mail.send(message)
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP authentication failed (%s): %s", exc.smtp_code, exc.smtp_error)
            return DeliveryResult(ok=False, code="smtp_auth", detail=str(exc.smtp_code))
        except smtplib.SMTPResponseException as exc:
            logger.error("SMTP server rejected message to %s (%s)", to, exc.smtp_code)
            return DeliveryResult(ok=False, code="smtp_error", detail=str(exc.smtp_code))
        except smtplib.SMTPException as exc:
            logger.error("SMTP error sending to %s: %s", to, exc)
            return DeliveryResult(ok=False, code="smtp_error", detail=exc.__class__.__name__)
        except (OSError, socket.timeout) as exc:
            logger.error("Could not reach mail server: %s", exc)
            return DeliveryResult(ok=False, code="connection_error", detail=exc.__class__.__name__)

        logger.info("Email sent to %s: %s", to, subject)
        return DeliveryResult(ok=True)

    def send_password_reset(self, to: str, reset_url: str) -> DeliveryResult:
        html = render_template(
            "emails/password_reset.html",
            reset_url=reset_url,
            current_year=datetime.utcnow().year,
        )
        text = (
            "We received a request to reset your password.\n\n"
            f"Open this link to choose a new one: {reset_url}\n\n"
            "The link expires in one hour. If you did not ask for this, ignore this email."
        )
        return self.send(to, PASSWORD_RESET_SUBJECT, html=html, text=text)


__all__ = ["DeliveryResult", "Mailer", "PASSWORD_RESET_SUBJECT"]

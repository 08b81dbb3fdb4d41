from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lighthouse import create_app
from lighthouse.core.auth.password import hash_password
from lighthouse.core.auth.session_store import SESSION_USER_KEY
from lighthouse.core.mail.mailer import DeliveryResult
from lighthouse.core.users.models import User
from lighthouse.domains.media.storage import MediaStorage
from lighthouse.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, HTTP)")


class FakeClock:
    """Settable replacement for datetime.utcnow."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMailer:
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_code: str | None = None

    def send(self, to, subject, *, html=None, text=None, reply_to=None) -> DeliveryResult:
        if self.fail_code:
            return DeliveryResult(ok=False, code=self.fail_code)
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text, "reply_to": reply_to})
        return DeliveryResult(ok=True)

    def send_password_reset(self, to, reset_url) -> DeliveryResult:
        if self.fail_code:
            return DeliveryResult(ok=False, code=self.fail_code)
        self.sent.append({"to": to, "reset_url": reset_url})
        return DeliveryResult(ok=True)

    @property
    def last_reset_url(self) -> str:
        return next(item["reset_url"] for item in reversed(self.sent) if "reset_url" in item)

    @property
    def last_token(self) -> str:
        return self.last_reset_url.split("token=", 1)[1]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def app(tmp_path, clock, mailer):
    """Per-test app on a fresh in-memory database with fake mail and clock."""
    app = create_app("testing")
    app.extensions["mailer"] = mailer
    app.extensions["media_storage"] = MediaStorage(tmp_path / "uploads", "test-bucket")
    credentials = app.extensions["credentials"]
    credentials.mailer = mailer
    credentials.clock = clock

    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def credentials(app):
    return app.extensions["credentials"]


@pytest.fixture()
def make_user(app):
    def _make(email="a@x.com", password="correct-horse", *, is_admin=True, name="Owner") -> User:
        user = User(email=email, name=name, password_hash=hash_password(password), is_admin=is_admin)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def admin_client(client, make_user):
    """Client whose session already holds an admin snapshot."""
    user = make_user("owner@lighthouse.test", "owner-pass-1")
    with client.session_transaction() as sess:
        sess[SESSION_USER_KEY] = {"id": user.id, "email": user.email, "name": user.name, "is_admin": True}
    return client

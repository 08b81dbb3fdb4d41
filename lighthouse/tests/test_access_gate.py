from __future__ import annotations

import pytest

from lighthouse.core.auth.access import (
    ADMIN_HOME_ENDPOINT,
    FORBIDDEN_NOTICE,
    HOME_ENDPOINT,
    LOGIN_ENDPOINT,
    SIGN_IN_NOTICE,
    AccessGate,
)
from lighthouse.core.auth.session_store import SESSION_USER_KEY, SessionUser


class MemoryStore:
    def __init__(self, user=None):
        self.user = user

    def get_user(self):
        return self.user

    def set_user(self, user):
        self.user = user

    def destroy(self):
        self.user = None


ADMIN = SessionUser(id=1, email="owner@x.com", name="Owner", is_admin=True)
STAFF = SessionUser(id=2, email="staff@x.com", name="Staff", is_admin=False)


def _gate(user=None):
    notices: list[str] = []
    return AccessGate(MemoryStore(user), notify=notices.append), notices


@pytest.mark.unit
@pytest.mark.parametrize("check", ["require_session", "require_admin"])
def test_absent_session_goes_to_login(check):
    gate, notices = _gate()

    admission = getattr(gate, check)()

    assert not admission.admitted
    assert admission.redirect_endpoint == LOGIN_ENDPOINT
    assert notices == [SIGN_IN_NOTICE]


@pytest.mark.unit
def test_non_admin_is_sent_home_not_to_login():
    gate, notices = _gate(STAFF)

    admission = gate.require_admin()

    assert not admission.admitted
    assert admission.redirect_endpoint == HOME_ENDPOINT
    assert notices == [FORBIDDEN_NOTICE]


@pytest.mark.unit
def test_non_admin_still_passes_session_check():
    gate, notices = _gate(STAFF)
    assert gate.require_session().admitted
    assert notices == []


@pytest.mark.unit
def test_admin_is_admitted():
    gate, notices = _gate(ADMIN)
    assert gate.require_admin().admitted
    assert gate.require_session().admitted
    assert notices == []


@pytest.mark.unit
def test_signed_in_visitor_is_bounced_from_login_without_notice():
    gate, notices = _gate(ADMIN)

    admission = gate.reject_if_authenticated()

    assert admission.redirect_endpoint == ADMIN_HOME_ENDPOINT
    assert notices == []
    assert _gate()[0].reject_if_authenticated().admitted


@pytest.mark.integration
def test_admin_pages_redirect_anonymous_to_login(client):
    resp = client.get("/admin/products")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/auth/login")


@pytest.mark.integration
def test_admin_pages_redirect_non_admin_home(client):
    with client.session_transaction() as sess:
        sess[SESSION_USER_KEY] = STAFF.to_dict()

    resp = client.get("/admin", follow_redirects=True)

    assert resp.request.path == "/"
    assert FORBIDDEN_NOTICE.encode() in resp.data


@pytest.mark.integration
def test_gate_reads_snapshot_without_database(client, app):
    # The snapshot names a user that does not exist in the database.
    with client.session_transaction() as sess:
        sess[SESSION_USER_KEY] = {"id": 999, "email": "ghost@x.com", "name": None, "is_admin": True}

    resp = client.get("/admin")

    assert resp.status_code == 200
    assert b"Dashboard" in resp.data

from __future__ import annotations

import json
from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from lighthouse.domains.menu.models import Category, Product
from lighthouse.domains.site import services
from lighthouse.domains.site.models import ContactMessage, Page, SiteSettings
from lighthouse.extensions import db


def _settings(**fields) -> SiteSettings:
    settings = SiteSettings(**fields)
    db.session.add(settings)
    db.session.commit()
    return settings


def test_home_renders_without_content(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert services.DEFAULT_HERO_URL.encode() in resp.data


def test_home_shows_featured_products_and_schedule(client):
    db.session.add(Product(name="Crab cakes", price=Decimal("12.00"), is_featured=True))
    db.session.add(Product(name="Plain bread", price=Decimal("2.00")))
    db.session.commit()
    _settings(hero_title="Fresh from the harbour", schedule_json=json.dumps({"Monday": "12:00-22:00"}))

    resp = client.get("/")

    assert b"Crab cakes" in resp.data
    assert b"Plain bread" not in resp.data
    assert b"Fresh from the harbour" in resp.data
    assert b"12:00-22:00" in resp.data


@pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]"])
def test_parse_schedule_ignores_bad_values(app, raw):
    assert services.parse_schedule(SiteSettings(id=1, schedule_json=raw)) == []


def test_parse_schedule_keeps_order(app):
    settings = SiteSettings(schedule_json='{"Mon": "9-17", "Tue": "closed"}')
    assert services.parse_schedule(settings) == [{"day": "Mon", "hours": "9-17"}, {"day": "Tue", "hours": "closed"}]


def test_hero_prefers_settings_then_home_page(app):
    db.session.add(Page(slug="home", title="Home", status="published", hero_image_url="/media/hero/page.jpg"))
    db.session.commit()

    assert services.resolve_hero(None)[0] == "/media/hero/page.jpg"
    assert services.resolve_hero(_settings(hero_image_url="/media/hero/main.jpg")) == ("/media/hero/main.jpg", None)


def test_hero_ignores_draft_pages(app):
    db.session.add(Page(slug="inicio", title="Inicio", status="draft", hero_image_url="/media/hero/draft.jpg"))
    db.session.commit()

    assert services.resolve_hero(None) == (services.DEFAULT_HERO_URL, None)


def test_menu_page(client):
    category = Category(name="Starters", sort_order=1)
    db.session.add(category)
    db.session.commit()
    db.session.add(Product(name="Calamari", price=Decimal("9.50"), category_id=category.id))
    db.session.commit()

    resp = client.get("/menu")

    assert resp.status_code == 200
    assert b"Starters" in resp.data
    assert b"Calamari" in resp.data
    assert b"9.50" in resp.data


def test_about_page(client):
    assert client.get("/about").status_code == 200


def test_contact_get_redirects_to_home_section(client):
    resp = client.get("/contact")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/#contacto")


def test_contact_post_stores_message_and_notifies(client, mailer):
    resp = client.post(
        "/contact",
        data={"name": "Guest", "email": "guest@x.com", "subject": "Booking", "message": "Table for 4?"},
    )

    assert resp.headers["Location"].endswith("/#contacto")
    stored = ContactMessage.query.one()
    assert stored.is_read is False
    assert stored.subject == "Booking"
    assert mailer.sent[0]["to"] == "owner@lighthouse.test"
    assert mailer.sent[0]["subject"] == "[Lighthouse] Booking"
    assert mailer.sent[0]["reply_to"] == "guest@x.com"


def test_contact_notification_failure_is_not_surfaced(client, mailer):
    mailer.fail_code = "smtp_error"

    resp = client.post(
        "/contact",
        data={"name": "Guest", "email": "guest@x.com", "message": "Hello"},
        follow_redirects=True,
    )

    assert b"Thanks for your message" in resp.data
    assert ContactMessage.query.count() == 1


def test_contact_requires_valid_email(client):
    resp = client.post("/contact", data={"name": "Guest", "email": "nope", "message": "Hi"}, follow_redirects=True)
    assert resp.status_code == 200
    assert ContactMessage.query.count() == 0


def test_published_page_by_slug(client):
    db.session.add(Page(slug="events", title="Private events", content="<p>Weddings</p>", status="published"))
    db.session.add(Page(slug="secret", title="Draft", status="draft"))
    db.session.commit()

    assert b"Private events" in client.get("/p/events").data
    assert client.get("/p/secret").status_code == 404
    assert client.get("/p/missing").status_code == 404


def test_admin_settings_upsert(admin_client):
    admin_client.post("/admin/settings", data={"hero_title": "Welcome", "schedule_json": '{"Sun": "closed"}'})
    admin_client.post("/admin/settings", data={"hero_title": "Welcome back", "address": ""})

    rows = SiteSettings.query.all()
    assert len(rows) == 1
    assert rows[0].hero_title == "Welcome back"
    assert rows[0].address is None


def test_admin_settings_rejects_bad_schedule(admin_client):
    resp = admin_client.post("/admin/settings", data={"schedule_json": "[]"}, follow_redirects=True)
    assert b"schedule" in resp.data.lower()
    assert SiteSettings.query.count() == 0


def test_admin_pages_crud(admin_client):
    admin_client.post("/admin/pages/save", data={"slug": "Events", "title": "Events", "status": "published"})
    page = Page.query.one()
    assert page.slug == "events"

    resp = admin_client.post(
        "/admin/pages/save", data={"slug": "events", "title": "Duplicate"}, follow_redirects=True
    )
    assert b"already uses that slug" in resp.data
    assert Page.query.count() == 1

    resp = admin_client.post("/admin/pages/save", data={"slug": "bad slug", "title": "x"})
    assert Page.query.count() == 1

    admin_client.post(f"/admin/pages/delete/{page.id}")
    assert Page.query.count() == 0


def test_admin_messages_mark_read(admin_client):
    message = ContactMessage(name="Guest", email="guest@x.com", message="Hi")
    db.session.add(message)
    db.session.commit()

    listing = admin_client.get("/admin/messages")
    assert b"guest@x.com" in listing.data

    admin_client.post(f"/admin/messages/{message.id}/read")
    db.session.expire_all()
    assert db.session.get(ContactMessage, message.id).is_read is True

    dashboard = admin_client.get("/admin/")
    assert b"0 unread messages" in dashboard.data

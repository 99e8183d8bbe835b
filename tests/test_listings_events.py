import datetime as dt
import pytest
from models import db
from hokies.integrations.ebay import EbayError
from hokies.services import listings, events
from hokies.services.errors import ExternalServiceError, ValidationError, NotFoundError


EBAY_ITEMS = [
    {"item_id": "v1|111|0", "title": "VT Starter Jacket", "price": {"value": "80.00", "currency": "USD"}},
    {"item_id": "v1|222|0", "title": "Hokie Bird Plush", "price": {"value": "15.00", "currency": "USD"}},
]


def test_syndicated_crud(app):
    listing = listings.create_syndicated(
        {"title": "Vintage Tee", "platform": "Depop", "link": "https://depop.com/x", "price": "$25"}
    )
    db.session.commit()
    assert listing.platform == "depop"
    assert listing.active is True

    listings.update_syndicated(listing.id, {"active": False})
    db.session.commit()
    assert listings.list_syndicated(active_only=True) == []
    assert len(listings.list_syndicated()) == 1

    listings.delete_syndicated(listing.id)
    db.session.commit()
    with pytest.raises(NotFoundError):
        listings.get_syndicated(listing.id)


def test_syndicated_requires_link(app):
    with pytest.raises(ValidationError):
        listings.create_syndicated({"title": "No link", "platform": "ebay", "link": " "})


def test_ebay_approval_filters_public_feed(client, app, admin_headers):
    app.extensions["ebay_client"].items = EBAY_ITEMS

    resp = client.get("/api/v1/admin/ebay/listings", headers=admin_headers)
    feed = resp.get_json()["data"]
    assert feed["total"] == 2
    assert [i["approved"] for i in feed["items"]] == [False, False]

    resp = client.post(
        "/api/v1/admin/ebay/listings/v1|222|0/approval", json={"approved": True}, headers=admin_headers
    )
    assert resp.get_json()["data"] == {"item_id": "v1|222|0", "approved": True}

    resp = client.get("/api/v1/listings/ebay")
    public = resp.get_json()["data"]
    assert public["total"] == 1
    assert public["items"][0]["title"] == "Hokie Bird Plush"

    client.post("/api/v1/admin/ebay/listings/v1|222|0/approval", json={"approved": False}, headers=admin_headers)
    assert listings.approved_ids() == set()


def test_ebay_failure_is_502(client, app):
    app.extensions["ebay_client"].error = EbayError("OAuth token generation failed: 401")
    resp = client.get("/api/v1/listings/ebay")
    assert resp.status_code == 502
    assert resp.get_json()["message"] == "Could not load eBay listings"


def test_fetch_feed_wraps_client_error(app):
    client = app.extensions["ebay_client"]
    client.error = EbayError("boom")
    with pytest.raises(ExternalServiceError):
        listings.fetch_feed(client)


def test_public_syndicated_endpoint(client, app):
    listings.create_syndicated({"title": "Shown", "platform": "grailed", "link": "https://grailed.com/a"})
    listings.create_syndicated({"title": "Hidden", "platform": "grailed", "link": "https://grailed.com/b", "active": False})
    db.session.commit()
    resp = client.get("/api/v1/listings/syndicated")
    assert [l["title"] for l in resp.get_json()["data"]] == ["Shown"]


def test_events_crud(client, admin_headers):
    resp = client.post(
        "/api/v1/admin/events",
        json={"name": "Pop-up at Squires", "date": "2026-11-01T18:00:00Z", "location": "Squires"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    event = resp.get_json()["data"]
    assert event["date"] == "2026-11-01T18:00:00"

    resp = client.put(f"/api/v1/admin/events/{event['id']}", json={"location": "Drillfield"}, headers=admin_headers)
    assert resp.get_json()["data"]["location"] == "Drillfield"

    resp = client.get("/api/v1/events")
    assert [e["id"] for e in resp.get_json()["data"]] == [event["id"]]

    resp = client.delete(f"/api/v1/admin/events/{event['id']}", headers=admin_headers)
    assert resp.status_code == 200
    resp = client.delete(f"/api/v1/admin/events/{event['id']}", headers=admin_headers)
    assert resp.status_code == 404


def test_events_upcoming_filter(app):
    base = dt.datetime(2026, 5, 1)
    events.create_event({"name": "Past", "date": base - dt.timedelta(days=1)})
    events.create_event({"name": "Future", "date": base + dt.timedelta(days=1)})
    db.session.commit()
    assert [e.name for e in events.list_events(upcoming_from=base)] == ["Future"]


def test_event_name_required(app):
    with pytest.raises(ValidationError):
        events.create_event({"name": " ", "date": dt.datetime(2026, 5, 1)})

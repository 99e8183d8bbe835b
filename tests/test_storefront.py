import datetime as dt
from models import db
from models.inventory import InventoryItem
from hokies.services import storefront
from hokies.utils import utcnow


def test_shop_groups_available_items_by_live_drop(client, make_item, make_drop):
    a = make_item("First", price="20")
    b = make_item("Second", price="25")
    live = make_drop(item_ids=[b.id, a.id], schedule_type="now", name="Homecoming")
    make_drop(name="Hidden draft")

    sold = db.session.get(InventoryItem, a.id)
    sold.available = False
    db.session.commit()

    resp = client.get("/api/v1/shop")
    assert resp.status_code == 200
    groups = resp.get_json()["data"]
    assert len(groups) == 1
    assert groups[0]["drop"]["id"] == live.id
    assert groups[0]["drop"]["name"] == "Homecoming"
    items = groups[0]["items"]
    assert [i["id"] for i in items] == [b.id]
    assert "cost" not in items[0]
    assert "submission_id" not in items[0]


def test_shop_skips_sold_out_drops(app, make_drop):
    drop = make_drop(schedule_type="now")
    for item in InventoryItem.query.filter_by(drop_id=drop.id).all():
        item.available = False
    db.session.commit()
    assert storefront.shop_listing() == []


def test_upcoming_drops_limit_and_countdown(client, make_drop):
    base = utcnow()
    ids = [
        make_drop(name=f"Drop {n}", schedule_type="schedule", scheduled_date=base + dt.timedelta(days=n)).id
        for n in (4, 1, 3, 2)
    ]
    resp = client.get("/api/v1/drops/upcoming")
    rows = resp.get_json()["data"]
    assert [r["name"] for r in rows] == ["Drop 1", "Drop 2", "Drop 3"]
    assert set(r["id"] for r in rows) <= set(ids)
    assert rows[0]["countdown"]["live_now"] is False
    assert rows[0]["item_count"] == 2


def test_upcoming_drops_countdown_values(app, make_drop):
    base = utcnow()
    make_drop(schedule_type="schedule", scheduled_date=base + dt.timedelta(hours=5, minutes=30))
    row = storefront.upcoming_drops(now=base)[0]
    assert row["countdown"]["days"] == 0
    assert row["countdown"]["hours"] == 5
    assert row["countdown"]["minutes"] == 30


def test_public_config(client, app):
    app.config["STRIPE_PUBLISHABLE_KEY"] = "pk_test_123"
    app.config["GOOGLE_PLACES_API_KEY"] = None
    try:
        resp = client.get("/api/v1/config")
        data = resp.get_json()["data"]
        assert data == {"stripe_publishable_key": "pk_test_123", "google_places_api_key": None}
    finally:
        app.config["STRIPE_PUBLISHABLE_KEY"] = None

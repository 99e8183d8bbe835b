import datetime as dt
from hokies.utils import utcnow


def _iso(when):
    return when.replace(microsecond=0).isoformat() + "Z"


def test_create_and_fetch_drop(client, admin_headers, make_item):
    ids = [make_item(f"Item {i}").id for i in range(3)]
    resp = client.post(
        "/api/v1/admin/drops",
        json={"name": "Rivalry Week", "description": "Beat UVA", "item_ids": ids},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    drop = resp.get_json()["data"]
    assert drop["status"] == "draft"
    assert drop["item_ids"] == ids
    assert len(drop["items"]) == 3

    resp = client.get(f"/api/v1/admin/drops/{drop['id']}", headers=admin_headers)
    assert resp.get_json()["data"]["description"] == "Beat UVA"

    resp = client.get("/api/v1/admin/inventory?unassigned=true", headers=admin_headers)
    assert resp.get_json()["data"] == []


def test_create_drop_validation_errors(client, admin_headers, make_item):
    ids = [make_item(f"Item {i}").id for i in range(11)]
    resp = client.post("/api/v1/admin/drops", json={"name": "Too big", "item_ids": ids}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please select between 1 and 10 items"

    resp = client.post("/api/v1/admin/drops", json={"name": "", "item_ids": ids[:1]}, headers=admin_headers)
    assert resp.status_code == 400

    resp = client.post(
        "/api/v1/admin/drops",
        json={"name": "Bad type", "item_ids": ids[:1], "schedule_type": "someday"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_scheduled_drop_lifecycle(client, admin_headers, scheduler, make_item):
    ids = [make_item(f"Item {i}").id for i in range(2)]
    when = utcnow() + dt.timedelta(days=1)
    resp = client.post(
        "/api/v1/admin/drops",
        json={"name": "Saturday", "item_ids": ids, "schedule_type": "schedule", "scheduled_date": _iso(when)},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    drop = resp.get_json()["data"]
    assert drop["status"] == "scheduled"
    assert drop["id"] in scheduler.countdowns

    resp = client.post(f"/api/v1/admin/drops/{drop['id']}/cancel", headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "draft"
    assert drop["id"] not in scheduler.countdowns

    resp = client.post(f"/api/v1/admin/drops/{drop['id']}/go-live", headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "live"

    resp = client.delete(f"/api/v1/admin/drops/{drop['id']}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Cannot delete a live drop. Please complete it first."

    resp = client.post(f"/api/v1/admin/drops/{drop['id']}/complete", headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "completed"

    resp = client.get("/api/v1/admin/drops?status=completed", headers=admin_headers)
    assert [d["id"] for d in resp.get_json()["data"]] == [drop["id"]]

    resp = client.delete(f"/api/v1/admin/drops/{drop['id']}", headers=admin_headers)
    assert resp.status_code == 200


def test_schedule_in_past_rejected(client, admin_headers, make_drop):
    drop = make_drop()
    past = utcnow() - dt.timedelta(minutes=1)
    resp = client.post(
        f"/api/v1/admin/drops/{drop.id}/schedule", json={"scheduled_date": _iso(past)}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please select a future date and time"


def test_update_drop_moves_items(client, admin_headers, make_item, make_drop):
    a, b, c = [make_item(f"Item {i}").id for i in range(3)]
    first = make_drop(item_ids=[a, b], name="First")
    second = make_drop(item_ids=[c], name="Second")

    resp = client.put(
        f"/api/v1/admin/drops/{second.id}",
        json={"name": "Second", "item_ids": [c, b]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["item_ids"] == [c, b]

    resp = client.get(f"/api/v1/admin/drops/{first.id}", headers=admin_headers)
    assert resp.get_json()["data"]["item_ids"] == [a]


def test_unknown_drop_and_status(client, admin_headers):
    resp = client.get("/api/v1/admin/drops/drop_nope", headers=admin_headers)
    assert resp.status_code == 404
    resp = client.get("/api/v1/admin/drops?status=archived", headers=admin_headers)
    assert resp.status_code == 400

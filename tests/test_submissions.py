import pytest
from models import db
from models.inventory import InventoryItem
from models.submission import SubmissionStatus
from hokies.services import submissions
from hokies.services.errors import ValidationError, ConflictError, NotFoundError


def _payload(**overrides):
    data = {
        "name": "Jordan Seller",
        "email": "jordan@vt.edu",
        "phone": "540-555-0100",
        "item_type": "hoodie",
        "description": "Maroon hoodie, barely worn",
        "condition": "excellent",
        "photos": ["https://img.example.com/a.jpg"],
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "item_type,condition,era,expected",
    [
        ("hoodie", "excellent", None, "$15 - $27"),
        ("jacket", "excellent", None, "$24 - $54"),
        ("hat", "excellent", "2020s", "$6 - $15"),
        ("unknown-thing", "excellent", None, "$9 - $24"),
    ],
)
def test_estimate_payout(item_type, condition, era, expected):
    assert submissions.estimate_payout(item_type, condition, era) == expected


def test_estimate_applies_condition_and_era():
    # (25 * 0.8 + 10) * 0.6 = 18, (45 * 0.8 + 10) * 0.6 = 27.6
    assert submissions.estimate_payout("hoodie", "good", "2000s") == "$18 - $28"


def test_create_submission_computes_estimate(app):
    sub = submissions.create_submission(_payload())
    db.session.commit()
    assert sub.status is SubmissionStatus.PENDING_ADMIN
    assert sub.estimate == "$15 - $27"
    assert sub.photo_urls == ["https://img.example.com/a.jpg"]


@pytest.mark.parametrize("count", [0, 6])
def test_photo_count_bounds(app, count):
    photos = [f"https://img.example.com/{i}.jpg" for i in range(count)]
    with pytest.raises(ValidationError):
        submissions.create_submission(_payload(photos=photos))


def test_invalid_condition(app):
    with pytest.raises(ValidationError):
        submissions.create_submission(_payload(condition="mint"))


def test_full_consignment_flow(app):
    sub = submissions.create_submission(_payload(era="1990s"))
    db.session.commit()

    sub, url = submissions.review_submission(sub.id, "22.50", "Nice piece")
    db.session.commit()
    assert sub.status is SubmissionStatus.PENDING_SELLER
    assert url == f"https://thrift.example.com/seller-approval.html?id={sub.id}"
    assert float(sub.admin_price) == 22.5

    sub, item = submissions.seller_approve(sub.id)
    db.session.commit()
    assert sub.status is SubmissionStatus.APPROVED
    assert sub.inventory_item_id == item.id
    assert item.id.startswith("sub_")
    assert item.submission_id == sub.id
    assert float(item.cost) == 22.5
    assert float(item.price) == 0
    assert item.size == "TBD"
    assert item.drop_id is None
    assert item.image_urls == sub.photo_urls


def test_double_approval_creates_one_item(app):
    sub = submissions.create_submission(_payload())
    submissions.review_submission(sub.id, 10)
    submissions.seller_approve(sub.id)
    db.session.commit()

    with pytest.raises(ConflictError) as exc:
        submissions.seller_approve(sub.id)
    assert exc.value.message == "This submission is no longer pending approval"
    db.session.rollback()
    assert InventoryItem.query.filter_by(submission_id=sub.id).count() == 1


def test_review_rules(app):
    sub = submissions.create_submission(_payload())
    db.session.commit()
    for price in (0, -5, None):
        with pytest.raises(ValidationError) as exc:
            submissions.review_submission(sub.id, price)
        assert exc.value.message == "Please enter a valid price"

    submissions.review_submission(sub.id, 12)
    db.session.commit()
    with pytest.raises(ConflictError) as exc:
        submissions.review_submission(sub.id, 15)
    assert exc.value.message == "This submission has already been reviewed"


def test_approve_before_review_rejected(app):
    sub = submissions.create_submission(_payload())
    db.session.commit()
    with pytest.raises(ConflictError):
        submissions.seller_approve(sub.id)


def test_reject_records_origin_and_reason(app):
    sub = submissions.create_submission(_payload())
    submissions.review_submission(sub.id, 12)
    submissions.reject_submission(sub.id, "")
    db.session.commit()
    assert sub.status is SubmissionStatus.REJECTED
    assert sub.rejected_from is SubmissionStatus.PENDING_SELLER
    assert sub.admin_notes == "No reason provided"

    with pytest.raises(ConflictError):
        submissions.reject_submission(sub.id, "again")


def test_missing_submission(app):
    with pytest.raises(NotFoundError):
        submissions.get_submission("submission_nope")


def test_public_and_admin_views(client, admin_headers):
    resp = client.post("/api/v1/sell/submissions", json=_payload())
    assert resp.status_code == 201
    public = resp.get_json()["data"]
    assert "email" not in public
    sub_id = public["id"]

    resp = client.get(f"/api/v1/admin/submissions/{sub_id}", headers=admin_headers)
    assert resp.get_json()["data"]["email"] == "jordan@vt.edu"

    resp = client.post(
        f"/api/v1/admin/submissions/{sub_id}/review",
        json={"price": 18, "notes": "Offer"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["approval_url"].endswith(f"?id={sub_id}")

    resp = client.post(f"/api/v1/sell/submissions/{sub_id}/accept")
    assert resp.status_code == 200
    body = resp.get_json()["data"]
    assert body["submission"]["status"] == "approved"

    resp = client.post(f"/api/v1/sell/submissions/{sub_id}/accept")
    assert resp.status_code == 409

    resp = client.get("/api/v1/admin/submissions?status=approved", headers=admin_headers)
    assert [s["id"] for s in resp.get_json()["data"]] == [sub_id]


def test_submission_schema_errors(client):
    resp = client.post("/api/v1/sell/submissions", json={"name": "x"})
    assert resp.status_code == 422
    assert resp.get_json()["status"] == "error"

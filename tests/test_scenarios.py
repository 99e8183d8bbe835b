"""End-to-end walkthroughs of the drop and consignment lifecycles."""
import datetime as dt
from decimal import Decimal
import pytest
from models import db
from models.drop import Drop, DropStatus
from models.inventory import InventoryItem
from models.submission import SubmissionStatus
from hokies.services import drops, submissions
from hokies.services.errors import ConflictError


def test_create_live_drop_assigns_items(app, make_item):
    i1, i2 = make_item("I1"), make_item("I2")
    drop = drops.save_drop({"name": "D", "item_ids": [i1.id, i2.id], "schedule_type": "now"})
    db.session.commit()
    assert drop.status is DropStatus.LIVE
    assert i1.drop_id == drop.id and i2.drop_id == drop.id


def test_scheduled_drop_goes_live_on_tick(app, scheduler, make_item):
    t = dt.datetime(2026, 4, 1, 9, 0, 0)
    target = t + dt.timedelta(hours=1)
    drop = drops.save_drop(
        {"name": "D", "item_ids": [make_item("I1").id], "schedule_type": "schedule", "scheduled_date": target},
        now=t,
    )
    db.session.commit()

    assert scheduler.tick(now=target + dt.timedelta(seconds=1)) == [drop.id]
    db.session.expire_all()
    assert drop.status is DropStatus.LIVE
    assert abs((drop.activated_date - target).total_seconds()) <= 1


def test_sold_out_live_drop_completes_on_sweep(app, scheduler, make_item):
    i1, i2 = make_item("I1"), make_item("I2")
    drop = drops.save_drop({"name": "D", "item_ids": [i1.id, i2.id], "schedule_type": "now"})
    db.session.commit()
    i1.available = False
    i2.available = False
    db.session.commit()

    assert scheduler.sweep() == [drop.id]
    db.session.expire_all()
    assert drop.status is DropStatus.COMPLETED


def test_edit_draft_swaps_items(app, make_item):
    i1, i2, i3 = make_item("I1"), make_item("I2"), make_item("I3")
    drop = drops.save_drop({"name": "D", "item_ids": [i1.id, i2.id]})
    db.session.commit()

    drops.save_drop({"name": "D", "item_ids": [i2.id, i3.id]}, drop_id=drop.id)
    db.session.commit()
    assert i1.drop_id is None
    assert i2.drop_id == drop.id
    assert i3.drop_id == drop.id


def test_approved_submission_becomes_unassigned_item(app):
    sub = submissions.create_submission({
        "name": "Sam",
        "email": "sam@vt.edu",
        "item_type": "jacket",
        "description": "Starter jacket",
        "condition": "good",
        "photos": ["https://img.example.com/j.jpg"],
    })
    submissions.review_submission(sub.id, "20.00")
    db.session.commit()
    assert sub.status is SubmissionStatus.PENDING_SELLER

    sub, item = submissions.seller_approve(sub.id)
    db.session.commit()
    assert sub.status is SubmissionStatus.APPROVED
    assert InventoryItem.query.filter_by(submission_id=sub.id).count() == 1
    assert item.cost == Decimal("20.00")
    assert item.available is True
    assert item.drop_id is None


def test_delete_live_drop_changes_nothing(app, make_item):
    i1, i2 = make_item("I1"), make_item("I2")
    drop = drops.save_drop({"name": "D", "item_ids": [i1.id, i2.id], "schedule_type": "now"})
    db.session.commit()

    with pytest.raises(ConflictError):
        drops.delete_drop(drop.id)
    db.session.rollback()

    kept = db.session.get(Drop, drop.id)
    assert kept.status is DropStatus.LIVE
    assert kept.item_ids == [i1.id, i2.id]
    assert db.session.get(InventoryItem, i1.id).drop_id == drop.id
    assert db.session.get(InventoryItem, i2.id).drop_id == drop.id

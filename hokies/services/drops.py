"""Drop lifecycle and inventory assignment.

This module is the only code path that writes ``InventoryItem.drop_id`` or
``DropItem`` membership rows, so both sides of the assignment always change
together. Functions here never commit; callers wrap them in
``transactional`` so a reassignment is persisted as one unit.
"""
import logging
from blinker import Namespace
from flask import current_app
from models import db, new_id
from models.drop import Drop, DropItem, DropStatus
from models.inventory import InventoryItem
from hokies.metrics import DROP_TRANSITIONS
from hokies.utils.clock import utcnow, to_naive_utc, isoformat
from .errors import ValidationError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)

MIN_DROP_ITEMS = 1
MAX_DROP_ITEMS = 10

SCHEDULE_TYPES = {
    "draft": DropStatus.DRAFT,
    "schedule": DropStatus.SCHEDULED,
    "now": DropStatus.LIVE,
}

DROP_TRANSITIONS_TABLE = {
    DropStatus.DRAFT: frozenset({DropStatus.SCHEDULED, DropStatus.LIVE}),
    DropStatus.SCHEDULED: frozenset({DropStatus.LIVE, DropStatus.DRAFT}),
    DropStatus.LIVE: frozenset({DropStatus.COMPLETED}),
    DropStatus.COMPLETED: frozenset(),
}

# Statuses whose member count must stay within bounds
ACTIVE_STATUSES = frozenset({DropStatus.DRAFT, DropStatus.SCHEDULED, DropStatus.LIVE})
DELETABLE_STATUSES = frozenset({DropStatus.DRAFT, DropStatus.SCHEDULED, DropStatus.COMPLETED})

_signals = Namespace()
# kwargs: drop_id, old_status, new_status, scheduled_date
drop_status_changed = _signals.signal("drop-status-changed")
# kwargs: drop_id
drop_deleted = _signals.signal("drop-deleted")


def can_transition(current: DropStatus, target: DropStatus) -> bool:
    return target in DROP_TRANSITIONS_TABLE[current]


def _notify(drop: Drop, old_status):
    drop_status_changed.send(
        current_app._get_current_object(),
        drop_id=drop.id,
        old_status=old_status,
        new_status=drop.status,
        scheduled_date=drop.scheduled_date,
    )


def _transition(drop: Drop, target: DropStatus, now, trigger: str):
    """Execute a status change; every transition goes through here."""
    current = drop.status
    if not can_transition(current, target):
        raise ConflictError(
            f"Cannot move drop '{drop.name}' from {current.value} to {target.value}"
        )
    drop.status = target
    if target is DropStatus.LIVE:
        drop.activated_date = now
    elif target is DropStatus.COMPLETED:
        drop.completed_date = now
    elif target is DropStatus.DRAFT:
        drop.scheduled_date = None
    drop.updated_at = now
    DROP_TRANSITIONS.labels(current.value, target.value, trigger).inc()
    logger.info("Drop %s moved %s -> %s (%s)", drop.id, current.value, target.value, trigger)
    _notify(drop, current)


# ---------------------------------------------------------------- reads

def get_drop(drop_id: str) -> Drop:
    drop = db.session.get(Drop, drop_id)
    if drop is None:
        raise NotFoundError("Drop not found")
    return drop


def _get_for_update(drop_id: str) -> Drop:
    drop = (
        Drop.query.filter_by(id=drop_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if drop is None:
        raise NotFoundError("Drop not found")
    return drop


def list_drops(status: DropStatus = None):
    query = Drop.query
    if status is not None:
        query = query.filter_by(status=status)
    if status is DropStatus.SCHEDULED:
        return query.order_by(Drop.scheduled_date.asc()).all()
    if status is DropStatus.LIVE:
        return query.order_by(Drop.activated_date.desc()).all()
    if status is DropStatus.COMPLETED:
        return query.order_by(Drop.completed_date.desc()).all()
    return query.order_by(Drop.created_at.desc()).all()


def member_items(drop: Drop):
    ids = drop.item_ids
    if not ids:
        return []
    by_id = {i.id: i for i in InventoryItem.query.filter(InventoryItem.id.in_(ids)).all()}
    return [by_id[i] for i in ids if i in by_id]


def drop_to_dict(drop: Drop, include_items=False):
    items = member_items(drop)
    data = {
        "id": drop.id,
        "name": drop.name,
        "description": drop.description,
        "status": drop.status.value,
        "item_ids": drop.item_ids,
        "item_count": len(drop.entries),
        "available_count": sum(1 for i in items if i.available),
        "scheduled_date": isoformat(drop.scheduled_date),
        "activated_date": isoformat(drop.activated_date),
        "completed_date": isoformat(drop.completed_date),
        "created_at": isoformat(drop.created_at),
        "updated_at": isoformat(drop.updated_at),
    }
    if include_items:
        data["items"] = [i.to_dict() for i in items]
    return data


# ---------------------------------------------------------------- validation

def _require_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a drop name")
    return name


def _normalize_item_ids(item_ids):
    ids = list(dict.fromkeys(str(i) for i in (item_ids or [])))
    if not MIN_DROP_ITEMS <= len(ids) <= MAX_DROP_ITEMS:
        raise ValidationError(
            f"Please select between {MIN_DROP_ITEMS} and {MAX_DROP_ITEMS} items"
        )
    return ids


def _require_future(when, now):
    if when is None:
        raise ValidationError("Please select a schedule date")
    when = to_naive_utc(when)
    if when <= now:
        raise ValidationError("Please select a future date and time")
    return when


def _plan_membership(drop_id, item_ids):
    """Load and check the target items before anything is mutated."""
    items = (
        InventoryItem.query.filter(InventoryItem.id.in_(item_ids))
        .with_for_update()
        .all()
    )
    by_id = {i.id: i for i in items}
    missing = [i for i in item_ids if i not in by_id]
    if missing:
        raise ValidationError(f"Unknown inventory item(s): {', '.join(missing)}")

    moving = {}
    for item in items:
        if item.drop_id and item.drop_id != drop_id:
            moving.setdefault(item.drop_id, []).append(item)
    for owner_id, taken in moving.items():
        owner = db.session.get(Drop, owner_id)
        if owner is None:
            continue
        if owner.status not in (DropStatus.DRAFT, DropStatus.SCHEDULED):
            raise ConflictError(
                f"'{taken[0].name}' already belongs to {owner.status.value} drop '{owner.name}'"
            )
        remaining = len([e for e in owner.entries if e.item_id not in {t.id for t in taken}])
        if remaining < MIN_DROP_ITEMS:
            raise ConflictError(f"Moving these items would leave drop '{owner.name}' empty")
    return [by_id[i] for i in item_ids]


def _apply_membership(drop: Drop, items, now):
    keep = {i.id for i in items}

    for entry in list(drop.entries):
        if entry.item_id not in keep:
            drop.entries.remove(entry)
            released = db.session.get(InventoryItem, entry.item_id)
            if released is not None and released.drop_id == drop.id:
                released.drop_id = None

    for item in items:
        stale = DropItem.query.filter_by(item_id=item.id).first()
        if stale is not None and stale.drop_id != drop.id:
            owner = stale.drop
            owner.entries.remove(stale)
            owner.updated_at = now
            logger.info("Item %s moved from drop %s to %s", item.id, owner.id, drop.id)

    # Deletes must reach the database before re-inserting unique item_ids
    db.session.flush()

    existing = {e.item_id: e for e in drop.entries}
    for position, item in enumerate(items):
        entry = existing.get(item.id)
        if entry is None:
            drop.entries.append(DropItem(item_id=item.id, position=position))
        else:
            entry.position = position
        item.drop_id = drop.id


# ---------------------------------------------------------------- writes

def save_drop(fields: dict, drop_id: str = None, now=None) -> Drop:
    """Create a drop or edit one, reassigning its member items.

    ``fields``: name, description, item_ids, schedule_type
    (draft|schedule|now) and scheduled_date. On edit an omitted
    schedule_type keeps the current status.
    """
    now = now or utcnow()
    name = _require_name(fields.get("name"))
    item_ids = _normalize_item_ids(fields.get("item_ids"))
    schedule_type = fields.get("schedule_type")
    if schedule_type is not None and schedule_type not in SCHEDULE_TYPES:
        raise ValidationError("Schedule type must be one of: draft, schedule, now")

    drop = None
    if drop_id is not None:
        drop = _get_for_update(drop_id)
        if drop.status is DropStatus.COMPLETED:
            raise ConflictError("Completed drops cannot be edited")
        target = SCHEDULE_TYPES[schedule_type] if schedule_type else drop.status
        if target is not drop.status and not can_transition(drop.status, target):
            raise ConflictError(
                f"Cannot move drop '{drop.name}' from {drop.status.value} to {target.value}"
            )
    else:
        target = SCHEDULE_TYPES[schedule_type or "draft"]

    scheduled_date = None
    if target is DropStatus.SCHEDULED:
        when = fields.get("scheduled_date")
        if when is None and drop is not None and drop.status is DropStatus.SCHEDULED:
            scheduled_date = drop.scheduled_date
        else:
            scheduled_date = _require_future(when, now)

    items = _plan_membership(drop.id if drop else None, item_ids)

    created = drop is None
    if created:
        drop = Drop(id=new_id("drop"), status=target, created_at=now)
        db.session.add(drop)
    drop.name = name
    if created or "description" in fields:
        drop.description = (fields.get("description") or "").strip() or None
    drop.updated_at = now
    _apply_membership(drop, items, now)

    if created:
        if target is DropStatus.SCHEDULED:
            drop.scheduled_date = scheduled_date
        elif target is DropStatus.LIVE:
            drop.activated_date = now
        DROP_TRANSITIONS.labels("none", target.value, "create").inc()
        logger.info("Drop %s created as %s with %d items", drop.id, target.value, len(items))
        _notify(drop, None)
    elif target is not drop.status:
        if target is DropStatus.SCHEDULED:
            drop.scheduled_date = scheduled_date
        _transition(drop, target, now, trigger="edit")
    elif target is DropStatus.SCHEDULED and scheduled_date != drop.scheduled_date:
        drop.scheduled_date = scheduled_date
        _notify(drop, drop.status)
    return drop


def schedule_drop(drop_id: str, when, now=None) -> Drop:
    now = now or utcnow()
    drop = _get_for_update(drop_id)
    if drop.status is not DropStatus.DRAFT:
        raise ConflictError("Only draft drops can be scheduled")
    when = _require_future(when, now)
    drop.scheduled_date = when
    _transition(drop, DropStatus.SCHEDULED, now, trigger="schedule")
    return drop


def reschedule_drop(drop_id: str, when, now=None) -> Drop:
    now = now or utcnow()
    drop = _get_for_update(drop_id)
    if drop.status is not DropStatus.SCHEDULED:
        raise ConflictError("Only scheduled drops can be rescheduled")
    drop.scheduled_date = _require_future(when, now)
    drop.updated_at = now
    logger.info("Drop %s rescheduled for %s", drop.id, drop.scheduled_date.isoformat())
    _notify(drop, drop.status)
    return drop


def cancel_scheduled_drop(drop_id: str, now=None) -> Drop:
    now = now or utcnow()
    drop = _get_for_update(drop_id)
    if drop.status is not DropStatus.SCHEDULED:
        raise ConflictError("Only scheduled drops can be cancelled")
    _transition(drop, DropStatus.DRAFT, now, trigger="cancel")
    return drop


def go_live(drop_id: str, now=None) -> Drop:
    now = now or utcnow()
    drop = _get_for_update(drop_id)
    if drop.status not in (DropStatus.DRAFT, DropStatus.SCHEDULED):
        raise ConflictError(f"Drop is already {drop.status.value}")
    _transition(drop, DropStatus.LIVE, now, trigger="manual")
    return drop


def activate_scheduled_drop(drop_id: str, now=None) -> bool:
    """Countdown-driven scheduled -> live. Returns False when there is nothing to do."""
    now = now or utcnow()
    drop = (
        Drop.query.filter_by(id=drop_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if drop is None or drop.status is not DropStatus.SCHEDULED:
        return False
    if drop.scheduled_date is None or drop.scheduled_date > now:
        return False
    _transition(drop, DropStatus.LIVE, now, trigger="countdown")
    return True


def complete_drop(drop_id: str, now=None) -> Drop:
    now = now or utcnow()
    drop = _get_for_update(drop_id)
    if drop.status is not DropStatus.LIVE:
        raise ConflictError("Only live drops can be marked complete")
    _transition(drop, DropStatus.COMPLETED, now, trigger="manual")
    return drop


def complete_if_sold_out(drop_id: str, now=None) -> bool:
    now = now or utcnow()
    drop = (
        Drop.query.filter_by(id=drop_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if drop is None or drop.status is not DropStatus.LIVE:
        return False
    items = member_items(drop)
    if not items or any(i.available for i in items):
        return False
    _transition(drop, DropStatus.COMPLETED, now, trigger="sold_out")
    return True


def complete_sold_out_drops(now=None):
    now = now or utcnow()
    completed = []
    for drop in Drop.query.filter_by(status=DropStatus.LIVE).all():
        if complete_if_sold_out(drop.id, now=now):
            completed.append(drop.id)
    return completed


def delete_drop(drop_id: str) -> None:
    drop = _get_for_update(drop_id)
    if drop.status not in DELETABLE_STATUSES:
        raise ConflictError("Cannot delete a live drop. Please complete it first.")
    for item in InventoryItem.query.filter_by(drop_id=drop.id).all():
        item.drop_id = None
    db.session.flush()
    db.session.delete(drop)
    logger.info("Drop %s deleted (%s)", drop.id, drop.status.value)
    drop_deleted.send(current_app._get_current_object(), drop_id=drop.id)


def release_item(item: InventoryItem) -> None:
    """Detach an item from its drop ahead of deleting the item."""
    entry = DropItem.query.filter_by(item_id=item.id).first()
    if entry is not None:
        owner = entry.drop
        if owner.status in ACTIVE_STATUSES and len(owner.entries) <= MIN_DROP_ITEMS:
            raise ConflictError(
                f"'{item.name}' is the only item in drop '{owner.name}'; edit or delete the drop first"
            )
        owner.entries.remove(entry)
        owner.updated_at = utcnow()
    item.drop_id = None


def find_assignment_mismatches():
    """Every place where an item's drop_id and the membership rows disagree."""
    problems = []
    members = {e.item_id: e.drop_id for e in DropItem.query.all()}
    for item in InventoryItem.query.all():
        listed_in = members.get(item.id)
        if item.drop_id != listed_in:
            problems.append(
                {"item_id": item.id, "drop_id": item.drop_id, "listed_in": listed_in}
            )
    for drop in Drop.query.filter(Drop.status.in_(list(ACTIVE_STATUSES))).all():
        count = len(drop.entries)
        if not MIN_DROP_ITEMS <= count <= MAX_DROP_ITEMS:
            problems.append({"drop_id": drop.id, "item_count": count})
    return problems

"""Read models for the public storefront."""
from flask import current_app
from models.drop import Drop, DropStatus
from models.inventory import InventoryItem
from hokies.utils.clock import utcnow, isoformat
from .scheduler import countdown_parts

UPCOMING_LIMIT = 3


def shop_listing():
    """Available items in live drops, grouped by drop, newest drop first."""
    drops = (
        Drop.query.filter_by(status=DropStatus.LIVE)
        .order_by(Drop.activated_date.desc())
        .all()
    )
    if not drops:
        return []
    items = (
        InventoryItem.query.filter(
            InventoryItem.drop_id.in_([d.id for d in drops]),
            InventoryItem.available.is_(True),
        ).all()
    )
    by_drop = {}
    for item in items:
        by_drop.setdefault(item.drop_id, []).append(item)

    result = []
    for drop in drops:
        order = {item_id: pos for pos, item_id in enumerate(drop.item_ids)}
        members = sorted(by_drop.get(drop.id, []), key=lambda i: order.get(i.id, len(order)))
        if not members:
            continue
        result.append({
            "drop": {
                "id": drop.id,
                "name": drop.name,
                "description": drop.description,
                "activated_date": isoformat(drop.activated_date),
            },
            "items": [_public_item(i) for i in members],
        })
    return result


def _public_item(item: InventoryItem):
    data = item.to_dict()
    data.pop("cost", None)
    data.pop("submission_id", None)
    return data


def upcoming_drops(now=None, limit=UPCOMING_LIMIT):
    now = now or utcnow()
    drops = (
        Drop.query.filter_by(status=DropStatus.SCHEDULED)
        .filter(Drop.scheduled_date.isnot(None))
        .order_by(Drop.scheduled_date.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": d.id,
            "name": d.name,
            "description": d.description,
            "item_count": len(d.entries),
            "scheduled_date": isoformat(d.scheduled_date),
            "countdown": countdown_parts(d.scheduled_date, now),
        }
        for d in drops
    ]


def public_config():
    cfg = current_app.config
    places_key = cfg.get("GOOGLE_PLACES_API_KEY") if cfg.get("GOOGLE_PLACES_ENABLED", True) else None
    return {
        "stripe_publishable_key": cfg.get("STRIPE_PUBLISHABLE_KEY") or None,
        "google_places_api_key": places_key or None,
    }

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from models import db, new_id
from models.inventory import InventoryItem, ItemImage, ItemCondition
from hokies.utils.clock import utcnow
from .errors import ValidationError, NotFoundError
from . import drops as drop_service

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
MAX_IMAGES = 10

EDITABLE_FIELDS = ("name", "description", "category", "size", "condition", "price", "cost", "available")


def to_money(value, field="price") -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid {field}")
    if amount < 0:
        raise ValidationError(f"{field.capitalize()} cannot be negative")
    return amount


def _clean_condition(value):
    if value in (None, ""):
        return None
    try:
        return ItemCondition(str(value).lower()).value
    except ValueError:
        raise ValidationError(
            "Condition must be one of: " + ", ".join(c.value for c in ItemCondition)
        )


def _set_images(item: InventoryItem, urls):
    urls = [u for u in (urls or []) if u]
    if len(urls) > MAX_IMAGES:
        raise ValidationError(f"An item can have at most {MAX_IMAGES} images")
    item.images = [ItemImage(position=i, url=u) for i, u in enumerate(urls)]


def get_item(item_id: str) -> InventoryItem:
    item = db.session.get(InventoryItem, item_id)
    if item is None:
        raise NotFoundError("Item not found")
    return item


def list_items(unassigned=None, ids=None, available=None):
    query = InventoryItem.query
    if unassigned is True:
        query = query.filter(InventoryItem.drop_id.is_(None))
    elif unassigned is False:
        query = query.filter(InventoryItem.drop_id.isnot(None))
    if ids is not None:
        query = query.filter(InventoryItem.id.in_(list(ids)))
    if available is not None:
        query = query.filter(InventoryItem.available.is_(bool(available)))
    return query.order_by(InventoryItem.created_at.desc()).all()


def create_item(fields: dict, prefix="item") -> InventoryItem:
    name = (fields.get("name") or "").strip()
    if not name:
        raise ValidationError("Item name is required")
    if fields.get("price") is None:
        raise ValidationError("Item price is required")
    item = InventoryItem(
        id=new_id(prefix),
        name=name,
        description=fields.get("description"),
        category=fields.get("category"),
        size=fields.get("size"),
        condition=_clean_condition(fields.get("condition")),
        price=to_money(fields["price"], "price"),
        cost=to_money(fields.get("cost") or 0, "cost"),
        available=bool(fields.get("available", True)),
        submission_id=fields.get("submission_id"),
        created_at=utcnow(),
        updated_at=utcnow(),
    )
    _set_images(item, fields.get("images"))
    db.session.add(item)
    logger.info("Inventory item %s created", item.id)
    return item


def update_item(item_id: str, fields: dict) -> InventoryItem:
    item = get_item(item_id)
    changes = {k: fields[k] for k in EDITABLE_FIELDS if k in fields}
    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise ValidationError("Item name is required")
        changes["name"] = name
    if "price" in changes:
        changes["price"] = to_money(changes["price"], "price")
    if "cost" in changes:
        changes["cost"] = to_money(changes["cost"] or 0, "cost")
    if "condition" in changes:
        changes["condition"] = _clean_condition(changes["condition"])
    if "available" in changes:
        changes["available"] = bool(changes["available"])
    for key, value in changes.items():
        setattr(item, key, value)
    if "images" in fields:
        _set_images(item, fields["images"])
    item.updated_at = utcnow()
    return item


def set_availability(item_id: str, available: bool) -> InventoryItem:
    item = get_item(item_id)
    item.available = bool(available)
    item.updated_at = utcnow()
    logger.info("Item %s marked %s", item.id, "available" if available else "sold")
    return item


def mark_unavailable(items):
    """Checkout path: flag a batch of already-locked items as sold."""
    now = utcnow()
    for item in items:
        item.available = False
        item.updated_at = now


def delete_item(item_id: str) -> None:
    item = get_item(item_id)
    drop_service.release_item(item)
    db.session.flush()
    db.session.delete(item)
    logger.info("Inventory item %s deleted", item_id)

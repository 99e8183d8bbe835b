import logging
from models import db, new_id
from models.listing import SyndicatedListing, ApprovedListing
from hokies.integrations.ebay import EbayError
from hokies.utils.clock import utcnow
from .errors import ValidationError, NotFoundError, ExternalServiceError

logger = logging.getLogger(__name__)

SYNDICATED_FIELDS = ("title", "platform", "price", "link", "image", "active")


def get_syndicated(listing_id: str) -> SyndicatedListing:
    listing = db.session.get(SyndicatedListing, listing_id)
    if listing is None:
        raise NotFoundError("Listing not found")
    return listing


def list_syndicated(active_only=False):
    query = SyndicatedListing.query
    if active_only:
        query = query.filter(SyndicatedListing.active.is_(True))
    return query.order_by(SyndicatedListing.created_at.desc()).all()


def _require(fields, keys):
    for key in keys:
        if not (fields.get(key) or "").strip():
            raise ValidationError(f"Listing {key} is required")


def create_syndicated(fields: dict) -> SyndicatedListing:
    _require(fields, ("title", "platform", "link"))
    listing = SyndicatedListing(
        id=new_id("listing"),
        title=fields["title"].strip(),
        platform=fields["platform"].strip().lower(),
        price=fields.get("price"),
        link=fields["link"].strip(),
        image=fields.get("image"),
        active=bool(fields.get("active", True)),
        created_at=utcnow(),
    )
    db.session.add(listing)
    return listing


def update_syndicated(listing_id: str, fields: dict) -> SyndicatedListing:
    listing = get_syndicated(listing_id)
    changes = {k: fields[k] for k in SYNDICATED_FIELDS if k in fields}
    _require(changes, [k for k in ("title", "platform", "link") if k in changes])
    if "platform" in changes:
        changes["platform"] = changes["platform"].strip().lower()
    if "active" in changes:
        changes["active"] = bool(changes["active"])
    for key, value in changes.items():
        setattr(listing, key, value)
    return listing


def delete_syndicated(listing_id: str) -> None:
    db.session.delete(get_syndicated(listing_id))


# -- eBay feed curation

def approved_ids():
    return {a.ebay_item_id for a in ApprovedListing.query.all()}


def set_approval(ebay_item_id: str, approved: bool) -> bool:
    existing = db.session.get(ApprovedListing, ebay_item_id)
    if approved and existing is None:
        db.session.add(ApprovedListing(ebay_item_id=ebay_item_id, approved_at=utcnow()))
    elif not approved and existing is not None:
        db.session.delete(existing)
    logger.info("eBay item %s %s", ebay_item_id, "approved" if approved else "hidden")
    return approved


def fetch_feed(client):
    """Seller's eBay listings, each flagged with its storefront approval."""
    try:
        feed = client.fetch_listings()
    except EbayError as e:
        logger.error("eBay feed fetch failed: %s", e)
        raise ExternalServiceError("Could not load eBay listings")
    approved = approved_ids()
    for item in feed["items"]:
        item["approved"] = item["item_id"] in approved
    return feed


def approved_feed(client):
    feed = fetch_feed(client)
    items = [i for i in feed["items"] if i["approved"]]
    return {"total": len(items), "items": items}

from flask import current_app
from hokies.services import storefront, listings as listing_service, events as event_service
from hokies.services.errors import ServiceError
from hokies.utils import ok, error
from . import storefront_bp


@storefront_bp.route("/shop", methods=["GET"])
def shop():
    """
    Items on sale, grouped by live drop
    ---
    tags: [Storefront]
    responses:
      200: {description: Live drops with their available items}
    """
    return ok(storefront.shop_listing())


@storefront_bp.route("/drops/upcoming", methods=["GET"])
def upcoming_drops():
    """
    Next scheduled drops with countdowns
    ---
    tags: [Storefront]
    responses:
      200: {description: Up to three scheduled drops, soonest first}
    """
    return ok(storefront.upcoming_drops())


@storefront_bp.route("/config", methods=["GET"])
def public_config():
    return ok(storefront.public_config())


@storefront_bp.route("/events", methods=["GET"])
def events():
    return ok([e.to_dict() for e in event_service.list_events()])


@storefront_bp.route("/listings/syndicated", methods=["GET"])
def syndicated_listings():
    return ok([l.to_dict() for l in listing_service.list_syndicated(active_only=True)])


@storefront_bp.route("/listings/ebay", methods=["GET"])
def ebay_listings():
    try:
        feed = listing_service.approved_feed(current_app.extensions["ebay_client"])
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(feed)

from flask import request, current_app
from hokies.services import listings as listing_service
from hokies.services.errors import ServiceError
from hokies.schemas.listings import (
    SyndicatedListingRequest,
    UpdateSyndicatedListingRequest,
    ApprovalRequest,
)
from hokies.utils import ok, error, transactional, validate_schema
from . import admin_bp


@admin_bp.route("/syndicated", methods=["GET"])
def list_syndicated():
    return ok([l.to_dict() for l in listing_service.list_syndicated()])


@admin_bp.route("/syndicated", methods=["POST"])
@validate_schema(SyndicatedListingRequest)
def create_syndicated():
    data: SyndicatedListingRequest = request.validated_data
    try:
        with transactional("Failed to create listing"):
            listing = listing_service.create_syndicated(data.model_dump())
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(listing.to_dict(), message="Listing created", status=201)


@admin_bp.route("/syndicated/<listing_id>", methods=["PATCH"])
@validate_schema(UpdateSyndicatedListingRequest)
def update_syndicated(listing_id):
    data: UpdateSyndicatedListingRequest = request.validated_data
    try:
        with transactional("Failed to update listing"):
            listing = listing_service.update_syndicated(listing_id, data.model_dump(exclude_unset=True))
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(listing.to_dict(), message="Listing updated")


@admin_bp.route("/syndicated/<listing_id>", methods=["DELETE"])
def delete_syndicated(listing_id):
    try:
        with transactional("Failed to delete listing"):
            listing_service.delete_syndicated(listing_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(message="Listing deleted")


@admin_bp.route("/ebay/listings", methods=["GET"])
def ebay_feed():
    """
    Seller's eBay listings with their storefront approval flag
    ---
    tags: [Admin]
    responses:
      200: {description: Feed}
      502: {description: eBay unavailable}
    """
    try:
        feed = listing_service.fetch_feed(current_app.extensions["ebay_client"])
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(feed)


@admin_bp.route("/ebay/listings/<item_id>/approval", methods=["POST"])
@validate_schema(ApprovalRequest)
def set_ebay_approval(item_id):
    data: ApprovalRequest = request.validated_data
    with transactional("Failed to update eBay approval"):
        approved = listing_service.set_approval(item_id, data.approved)
    return ok({"item_id": item_id, "approved": approved})

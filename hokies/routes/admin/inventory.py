from flask import request
from hokies.services import inventory as inventory_service
from hokies.services.errors import ServiceError
from hokies.schemas.inventory import CreateItemRequest, UpdateItemRequest
from hokies.utils import ok, error, transactional, validate_schema, query_flag
from . import admin_bp


@admin_bp.route("/inventory", methods=["GET"])
def list_inventory():
    """
    List inventory items
    ---
    tags: [Admin]
    parameters:
      - {in: query, name: unassigned, type: boolean}
      - {in: query, name: available, type: boolean}
    responses:
      200: {description: Items}
    """
    items = inventory_service.list_items(
        unassigned=query_flag("unassigned"),
        available=query_flag("available"),
    )
    return ok([i.to_dict() for i in items])


@admin_bp.route("/inventory", methods=["POST"])
@validate_schema(CreateItemRequest)
def create_inventory_item():
    data: CreateItemRequest = request.validated_data
    try:
        with transactional("Failed to create item"):
            item = inventory_service.create_item(data.model_dump())
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(item.to_dict(), message="Item created", status=201)


@admin_bp.route("/inventory/<item_id>", methods=["GET"])
def get_inventory_item(item_id):
    try:
        item = inventory_service.get_item(item_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(item.to_dict())


@admin_bp.route("/inventory/<item_id>", methods=["PATCH"])
@validate_schema(UpdateItemRequest)
def update_inventory_item(item_id):
    data: UpdateItemRequest = request.validated_data
    try:
        with transactional("Failed to update item"):
            item = inventory_service.update_item(item_id, data.model_dump(exclude_unset=True))
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(item.to_dict(), message="Item updated")


@admin_bp.route("/inventory/<item_id>", methods=["DELETE"])
def delete_inventory_item(item_id):
    try:
        with transactional("Failed to delete item"):
            inventory_service.delete_item(item_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(message="Item deleted")


@admin_bp.route("/inventory/<item_id>/sold", methods=["POST"])
def mark_item_sold(item_id):
    try:
        with transactional("Failed to mark item sold"):
            item = inventory_service.set_availability(item_id, False)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(item.to_dict(), message="Item marked as sold")


@admin_bp.route("/inventory/<item_id>/available", methods=["POST"])
def mark_item_available(item_id):
    try:
        with transactional("Failed to mark item available"):
            item = inventory_service.set_availability(item_id, True)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(item.to_dict(), message="Item marked as available")

from flask import request, current_app
from models.order import OrderStatus
from hokies.services import orders as order_service
from hokies.services.errors import ServiceError
from hokies.schemas.orders import OrderStatusRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import admin_bp


@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    status = request.args.get("status")
    if status:
        try:
            status = OrderStatus(status)
        except ValueError:
            return error("Unknown order status", status=400)
    orders = order_service.list_orders(status or None)
    return ok([order_service.order_to_dict(o) for o in orders])


@admin_bp.route("/orders/<order_id>", methods=["GET"])
def get_order(order_id):
    try:
        order = order_service.get_order(order_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(order_service.order_to_dict(order))


@admin_bp.route("/orders/<order_id>/status", methods=["POST"])
@validate_schema(OrderStatusRequest)
def update_order_status(order_id):
    data: OrderStatusRequest = request.validated_data
    try:
        with transactional("Failed to update order status"):
            order = order_service.update_order_status(order_id, data.status)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(order_service.order_to_dict(order), message=f"Order marked {order.status.value}")


@admin_bp.route("/orders/<order_id>/label", methods=["POST"])
def create_order_label(order_id):
    """
    Buy a shipping label for an order that has none
    ---
    tags: [Admin]
    responses:
      200: {description: Label attached}
      409: {description: Order already has a label}
      502: {description: Shipping provider failed}
    """
    shipping = current_app.extensions["shipping_gateway"]
    try:
        with transactional("Failed to attach shipping label"):
            order = order_service.attach_shipping_label(order_id, shipping)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(order_service.order_to_dict(order), message="Shipping label created")


@admin_bp.route("/profits", methods=["GET"])
def profits():
    return ok(order_service.profit_report())

import logging
from flask import request, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from hokies.services import orders as order_service
from hokies.services.errors import ServiceError, ExternalServiceError
from hokies.schemas.orders import CheckoutRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import storefront_bp

logger = logging.getLogger(__name__)


@storefront_bp.route("/checkout", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["CHECKOUT_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@validate_schema(CheckoutRequest)
def checkout():
    """
    Pay for items from live drops
    ---
    tags: [Storefront]
    responses:
      201: {description: Order paid}
      402: {description: Payment declined}
      409: {description: An item is no longer available}
    """
    data: CheckoutRequest = request.validated_data
    try:
        with transactional("Checkout failed"):
            order = order_service.checkout(
                data.model_dump(), current_app.extensions["payment_gateway"]
            )
    except ServiceError as e:
        return error(e.message, status=e.status)

    order_id = order.id
    try:
        with transactional("Failed to attach shipping label"):
            order = order_service.attach_shipping_label(
                order_id, current_app.extensions["shipping_gateway"]
            )
    except ExternalServiceError:
        logger.warning("Order %s placed without a shipping label", order_id)
        order = order_service.get_order(order_id)

    return ok(order_service.order_to_dict(order), message="Order placed successfully", status=201)

import logging
from decimal import Decimal
from models import db, new_id
from models.order import Order, OrderLine, OrderStatus
from models.inventory import InventoryItem
from models.drop import Drop, DropStatus
from hokies.integrations.shipping import ShippingError
from hokies.utils.clock import utcnow, isoformat
from .errors import ValidationError, NotFoundError, ConflictError, PaymentError, ExternalServiceError
from .inventory import mark_unavailable

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip")


def get_order(order_id: str) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def list_orders(status: OrderStatus = None):
    query = Order.query
    if status is not None:
        query = query.filter_by(status=status)
    return query.order_by(Order.created_at.desc()).all()


def _lock_purchasable(item_ids):
    items = (
        InventoryItem.query.filter(InventoryItem.id.in_(item_ids))
        .with_for_update()
        .all()
    )
    by_id = {i.id: i for i in items}
    live = {
        d.id
        for d in Drop.query.filter(
            Drop.id.in_([i.drop_id for i in items if i.drop_id]),
            Drop.status == DropStatus.LIVE,
        ).all()
    }
    ordered = []
    for item_id in item_ids:
        item = by_id.get(item_id)
        if item is None:
            raise ConflictError("Sorry, an item in your cart is no longer available")
        if not item.available or item.drop_id not in live:
            raise ConflictError(f"Sorry, {item.name} is no longer available")
        ordered.append(item)
    return ordered


def checkout(fields: dict, payments) -> Order:
    """Charge the customer and record a paid order for items in live drops."""
    item_ids = list(dict.fromkeys(fields.get("item_ids") or []))
    if not item_ids:
        raise ValidationError("Your cart is empty")
    name = (fields.get("customer_name") or "").strip()
    email = (fields.get("customer_email") or "").strip()
    if not name or not email:
        raise ValidationError("Name and email are required")
    address = fields.get("shipping_address") or {}
    for key in ADDRESS_FIELDS:
        if not (address.get(key) or "").strip():
            raise ValidationError(f"Shipping {key} is required")

    items = _lock_purchasable(item_ids)
    total = sum((Decimal(i.price) for i in items), Decimal("0.00"))

    result = payments.charge(
        total,
        fields.get("payment_method_id"),
        description=f"Hokies Thrift order ({len(items)} items)",
        email=email,
    )
    if not result.success:
        raise PaymentError(result.error or "Payment failed")

    now = utcnow()
    order = Order(
        id=new_id("order"),
        customer_name=name,
        customer_email=email,
        ship_street=address["street"].strip(),
        ship_apt=(address.get("apt") or "").strip() or None,
        ship_city=address["city"].strip(),
        ship_state=address["state"].strip(),
        ship_zip=address["zip"].strip(),
        total=total,
        status=OrderStatus.PAID,
        payment_method="stripe",
        payment_reference=result.reference,
        created_at=now,
        updated_at=now,
    )
    order.lines = [OrderLine(product_id=i.id, name=i.name, price=i.price) for i in items]
    db.session.add(order)
    mark_unavailable(items)
    logger.info("Order %s paid: %d items, total %s", order.id, len(items), total)
    return order


def attach_shipping_label(order_id: str, shipping) -> Order:
    order = get_order(order_id)
    if order.has_label:
        raise ConflictError("Order already has a shipping label")
    try:
        label = shipping.create_label(order)
    except ShippingError as e:
        logger.error("Shipping label for order %s failed: %s", order.id, e)
        raise ExternalServiceError("Could not create a shipping label")
    order.label_url = label.label_url
    order.tracking_number = label.tracking_number
    order.tracking_url = label.tracking_url
    order.carrier = label.carrier
    order.service = label.service
    order.shipping_cost = label.cost
    order.label_transaction_id = label.transaction_id
    order.label_created_at = utcnow()
    order.updated_at = utcnow()
    return order


def update_order_status(order_id: str, status) -> Order:
    try:
        status = OrderStatus(status)
    except ValueError:
        raise ValidationError(
            "Status must be one of: " + ", ".join(s.value for s in OrderStatus)
        )
    order = get_order(order_id)
    previous = order.status
    order.status = status
    order.updated_at = utcnow()
    logger.info("Order %s status %s -> %s", order.id, previous.value, status.value)
    return order


def order_to_dict(order: Order):
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "shipping_address": {
            "street": order.ship_street,
            "apt": order.ship_apt,
            "city": order.ship_city,
            "state": order.ship_state,
            "zip": order.ship_zip,
            "full": order.full_address,
        },
        "items": [line.to_dict() for line in order.lines],
        "total": float(order.total),
        "status": order.status.value,
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "shipping": {
            "label_url": order.label_url,
            "tracking_number": order.tracking_number,
            "tracking_url": order.tracking_url,
            "carrier": order.carrier,
            "service": order.service,
            "cost": float(order.shipping_cost) if order.shipping_cost is not None else None,
            "created_at": isoformat(order.label_created_at),
        } if order.has_label else None,
        "created_at": isoformat(order.created_at),
    }


def profit_report():
    """Revenue and cost of delivered orders, costed at each item's current cost."""
    orders = (
        Order.query.filter_by(status=OrderStatus.DELIVERED)
        .order_by(Order.created_at.desc())
        .all()
    )
    product_ids = {line.product_id for o in orders for line in o.lines}
    costs = {}
    if product_ids:
        costs = {
            i.id: Decimal(i.cost or 0)
            for i in InventoryItem.query.filter(InventoryItem.id.in_(list(product_ids))).all()
        }

    revenue = Decimal("0.00")
    total_cost = Decimal("0.00")
    rows = []
    for order in orders:
        for line in order.lines:
            price = Decimal(line.price)
            cost = costs.get(line.product_id, Decimal("0.00"))
            revenue += price
            total_cost += cost
            rows.append({
                "order_id": order.id,
                "product_id": line.product_id,
                "name": line.name,
                "price": float(price),
                "cost": float(cost),
                "profit": float(price - cost),
                "date": isoformat(order.created_at),
            })
    profit = revenue - total_cost
    return {
        "orders": len(orders),
        "items_sold": len(rows),
        "revenue": float(revenue),
        "costs": float(total_cost),
        "profit": float(profit),
        "margin": float(round(profit / revenue * 100, 1)) if revenue else 0.0,
        "rows": rows,
    }

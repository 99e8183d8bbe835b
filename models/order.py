import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from models import db, enum_column, MONEY


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_status_created", "status", "created_at"),
    )
    id = Column(String(64), primary_key=True)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255), nullable=False)

    # Shipping address
    ship_street = Column(String(200), nullable=False)
    ship_apt = Column(String(50), nullable=True)
    ship_city = Column(String(100), nullable=False)
    ship_state = Column(String(50), nullable=False)
    ship_zip = Column(String(20), nullable=False)

    total = Column(MONEY, nullable=False)
    status = Column(enum_column(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    payment_method = Column(String(30), nullable=False, default="stripe")
    payment_reference = Column(String(255), nullable=True)

    # Shipping label metadata
    tracking_number = Column(String(100), nullable=True)
    tracking_url = Column(Text, nullable=True)
    carrier = Column(String(50), nullable=True)
    service = Column(String(100), nullable=True)
    shipping_cost = Column(MONEY, nullable=True)
    label_url = Column(Text, nullable=True)
    label_transaction_id = Column(String(100), nullable=True)
    label_created_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    lines = db.relationship("OrderLine", backref="order", cascade="all, delete-orphan", lazy=True)

    @property
    def full_address(self):
        street = self.ship_street + (f", {self.ship_apt}" if self.ship_apt else "")
        return f"{street}, {self.ship_city}, {self.ship_state} {self.ship_zip}"

    @property
    def has_label(self):
        return bool(self.tracking_number)


class OrderLine(db.Model):
    __tablename__ = "order_lines"
    id = Column(Integer, primary_key=True)
    order_id = Column(String(64), ForeignKey("orders.id"), nullable=False, index=True)
    # No FK: the product may be deleted later, the line keeps its snapshot
    product_id = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)
    price = Column(MONEY, nullable=False)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": float(self.price),
        }

# --- models/inventory.py ---
import enum
from datetime import datetime
from models import db, MONEY


class ItemCondition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class InventoryItem(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_drop_available", "drop_id", "available"),
    )

    id = db.Column(db.String(64), primary_key=True)

    # Core details
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=True)            # hoodie, jacket, jersey...
    size = db.Column(db.String(20), nullable=True)
    condition = db.Column(db.String(20), nullable=True)           # see ItemCondition

    # Pricing
    price = db.Column(MONEY, nullable=False, default=0)           # Retail price
    cost = db.Column(MONEY, nullable=False, default=0)            # What we paid

    # Availability & assignment
    available = db.Column(db.Boolean, nullable=False, default=True)
    # Written only by hokies.services.drops
    drop_id = db.Column(db.String(64), db.ForeignKey("drops.id"), nullable=True, index=True)

    # Consignment back-reference
    submission_id = db.Column(db.String(64), nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    images = db.relationship(
        "ItemImage",
        backref="item",
        cascade="all, delete-orphan",
        order_by="ItemImage.position",
        lazy=True,
    )

    @property
    def image_urls(self):
        return [img.url for img in self.images]

    @property
    def main_image(self):
        return self.images[0].url if self.images else None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "size": self.size,
            "condition": self.condition,
            "price": float(self.price or 0),
            "cost": float(self.cost or 0),
            "available": bool(self.available),
            "drop_id": self.drop_id,
            "submission_id": self.submission_id,
            "images": self.image_urls,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<InventoryItem id={self.id} drop={self.drop_id} available={self.available}>"


class ItemImage(db.Model):
    __tablename__ = "product_images"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.String(64), db.ForeignKey("products.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)  # 0 = main image
    url = db.Column(db.Text, nullable=False)

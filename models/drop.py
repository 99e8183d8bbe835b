import enum
from datetime import datetime
from models import db, enum_column


class DropStatus(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"


class Drop(db.Model):
    __tablename__ = "drops"
    __table_args__ = (
        db.Index("ix_drops_status_scheduled", "status", "scheduled_date"),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(enum_column(DropStatus), nullable=False, default=DropStatus.DRAFT)

    scheduled_date = db.Column(db.DateTime, nullable=True)   # only meaningful while scheduled
    activated_date = db.Column(db.DateTime, nullable=True)   # set on entering live
    completed_date = db.Column(db.DateTime, nullable=True)   # set on entering completed

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    entries = db.relationship(
        "DropItem",
        backref="drop",
        cascade="all, delete-orphan",
        order_by="DropItem.position",
        lazy=True,
    )

    @property
    def item_ids(self):
        return [e.item_id for e in self.entries]

    def __repr__(self):
        return f"<Drop id={self.id} status={self.status.value if self.status else None}>"


class DropItem(db.Model):
    """Membership row; an item appears in at most one drop."""
    __tablename__ = "drop_items"

    id = db.Column(db.Integer, primary_key=True)
    drop_id = db.Column(db.String(64), db.ForeignKey("drops.id"), nullable=False, index=True)
    item_id = db.Column(db.String(64), db.ForeignKey("products.id"), nullable=False, unique=True)
    position = db.Column(db.Integer, nullable=False, default=0)

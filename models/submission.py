import enum
from datetime import datetime
from models import db, enum_column, MONEY


class SubmissionStatus(str, enum.Enum):
    PENDING_ADMIN = "pending_admin"
    PENDING_SELLER = "pending_seller"
    APPROVED = "approved"
    REJECTED = "rejected"


class SellerSubmission(db.Model):
    __tablename__ = "seller_submissions"
    __table_args__ = (
        db.Index("ix_submissions_status_created", "status", "created_at"),
    )

    id = db.Column(db.String(64), primary_key=True)

    # Seller contact
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30), nullable=True)

    # Item details
    item_type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)
    condition = db.Column(db.String(20), nullable=False)
    era = db.Column(db.String(20), nullable=True)
    estimate = db.Column(db.String(50), nullable=True)        # display only, e.g. "$12 - $22"

    # Review
    status = db.Column(enum_column(SubmissionStatus), nullable=False, default=SubmissionStatus.PENDING_ADMIN)
    admin_price = db.Column(MONEY, nullable=True)
    admin_notes = db.Column(db.Text, nullable=True)
    rejected_from = db.Column(enum_column(SubmissionStatus), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    seller_approved_at = db.Column(db.DateTime, nullable=True)
    inventory_item_id = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    photos = db.relationship(
        "SubmissionPhoto",
        backref="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionPhoto.position",
        lazy=True,
    )

    @property
    def photo_urls(self):
        return [p.url for p in self.photos]

    def __repr__(self):
        return f"<SellerSubmission id={self.id} status={self.status.value if self.status else None}>"


class SubmissionPhoto(db.Model):
    __tablename__ = "submission_photos"

    id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.String(64), db.ForeignKey("seller_submissions.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    url = db.Column(db.Text, nullable=False)

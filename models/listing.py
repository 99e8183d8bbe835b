from datetime import datetime
from models import db


class SyndicatedListing(db.Model):
    """Hand-entered listing living on another marketplace."""
    __tablename__ = "syndicated_listings"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    platform = db.Column(db.String(50), nullable=False)      # ebay, depop, grailed...
    price = db.Column(db.String(50), nullable=True)          # display string
    link = db.Column(db.Text, nullable=False)
    image = db.Column(db.Text, nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "platform": self.platform,
            "price": self.price,
            "link": self.link,
            "image": self.image,
            "active": bool(self.active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ApprovedListing(db.Model):
    """eBay feed item the admin chose to show on the storefront."""
    __tablename__ = "approved_listings"

    ebay_item_id = db.Column(db.String(100), primary_key=True)
    approved_at = db.Column(db.DateTime, default=datetime.utcnow)

import uuid
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Numeric

# Money columns: two decimal places, read back as Decimal
MONEY = Numeric(10, 2, asdecimal=True)

db = SQLAlchemy()


def new_id(prefix: str) -> str:
    """Opaque record id, e.g. ``drop_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"


def enum_column(enum_cls, length=20):
    """Closed string enum stored by value, validated on assignment."""
    return db.Enum(
        enum_cls,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda e: [m.value for m in e],
    )


# Re-export common models for convenience
from .inventory import InventoryItem, ItemImage, ItemCondition  # noqa: F401,E402
from .drop import Drop, DropItem, DropStatus  # noqa: F401,E402
from .submission import SellerSubmission, SubmissionPhoto, SubmissionStatus  # noqa: F401,E402
from .order import Order, OrderLine, OrderStatus  # noqa: F401,E402
from .listing import SyndicatedListing, ApprovedListing  # noqa: F401,E402
from .event import StoreEvent  # noqa: F401,E402

import os
import sys
import datetime as dt
from decimal import Decimal
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')

from models import db
from hokies.config import TestingConfig
from hokies.integrations import ChargeResult, ShippingLabel, ShippingError


class FakePayments:
    """Stands in for the Stripe gateway; records every charge."""

    def __init__(self):
        self.charges = []
        self.fail_with = None

    def charge(self, amount, payment_method_id, description="", email=None):
        self.charges.append({"amount": Decimal(amount), "payment_method_id": payment_method_id, "email": email})
        if self.fail_with:
            return ChargeResult(False, error=self.fail_with)
        return ChargeResult(True, reference=f"pi_test_{len(self.charges)}")


class FakeShipping:
    def __init__(self):
        self.labels = []
        self.fail = False

    def create_label(self, order):
        if self.fail:
            raise ShippingError("carrier unavailable")
        self.labels.append(order.id)
        return ShippingLabel(
            label_url=f"https://labels.example.com/{order.id}.pdf",
            tracking_number=f"9400{len(self.labels):018d}",
            tracking_url="https://tools.usps.com/track",
            carrier="USPS",
            service="First Class",
            cost=Decimal("4.85"),
            transaction_id=f"txn_{len(self.labels)}",
        )


class FakeEbay:
    def __init__(self, items=None):
        self.items = items or []
        self.error = None

    def fetch_listings(self):
        if self.error:
            raise self.error
        return {"total": len(self.items), "items": [dict(i) for i in self.items]}


def build_app(**overrides):
    """Fresh app on a TestingConfig variant."""
    from hokies import create_app
    config = type("OverrideConfig", (TestingConfig,), overrides)
    return create_app(config)


@pytest.fixture(scope='session')
def app_instance():
    return build_app()


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        app_instance.extensions["payment_gateway"] = FakePayments()
        app_instance.extensions["shipping_gateway"] = FakeShipping()
        app_instance.extensions["ebay_client"] = FakeEbay()
        app_instance.extensions["drop_scheduler"].sync()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_headers(app):
    from hokies.utils import create_access_token
    return {"Authorization": f"Bearer {create_access_token('admin', 'admin')}"}


@pytest.fixture()
def payments(app):
    return app.extensions["payment_gateway"]


@pytest.fixture()
def shipping(app):
    return app.extensions["shipping_gateway"]


@pytest.fixture()
def scheduler(app):
    return app.extensions["drop_scheduler"]


@pytest.fixture()
def now():
    return dt.datetime(2026, 3, 14, 12, 0, 0)


@pytest.fixture()
def make_item(app):
    from hokies.services import inventory

    def _make(name="VT Hoodie", price="30.00", cost="10.00", **extra):
        item = inventory.create_item({"name": name, "price": price, "cost": cost, **extra})
        db.session.commit()
        return item

    return _make


@pytest.fixture()
def make_drop(app, make_item):
    from hokies.services import drops

    def _make(item_ids=None, schedule_type="draft", name="Game Day Drop", now=None, **extra):
        if item_ids is None:
            item_ids = [make_item(f"Item {i}").id for i in range(2)]
        drop = drops.save_drop(
            {"name": name, "item_ids": item_ids, "schedule_type": schedule_type, **extra}, now=now
        )
        db.session.commit()
        return drop

    return _make

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import requests

logger = logging.getLogger(__name__)

SHIPPO_API = "https://api.goshippo.com"


class ShippingError(Exception):
    pass


@dataclass
class ShippingLabel:
    label_url: str
    tracking_number: str
    tracking_url: Optional[str]
    carrier: Optional[str]
    service: Optional[str]
    cost: Optional[Decimal]
    transaction_id: str


def _pick_rate(rates, preferred):
    """Preferred service level when offered, otherwise the cheapest rate."""
    chosen = None
    if preferred in ("usps_first", "usps_priority"):
        chosen = next((r for r in rates if (r.get("servicelevel") or {}).get("token") == preferred), None)
    elif preferred == "usps_ground_advantage":
        chosen = next(
            (r for r in rates if "ground" in ((r.get("servicelevel") or {}).get("name") or "").lower()),
            None,
        )
    if chosen is None:
        chosen = min(rates, key=lambda r: Decimal(str(r.get("amount") or "0")))
    return chosen


class ShippoClient:
    def __init__(self, api_key, ship_from: dict, parcel: dict, default_service="usps_first", session=None, timeout=20):
        self.api_key = api_key
        self.ship_from = ship_from
        self.parcel = parcel
        self.default_service = default_service
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"ShippoToken {api_key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_config(cls, config, session=None):
        ship_from = {
            "name": config.get("SHIP_FROM_NAME", "Hokies Thrift"),
            "street1": config.get("SHIP_FROM_STREET"),
            "city": config.get("SHIP_FROM_CITY"),
            "state": config.get("SHIP_FROM_STATE"),
            "zip": config.get("SHIP_FROM_ZIP"),
            "country": "US",
            "email": config.get("SHIP_FROM_EMAIL") or "",
            "phone": config.get("SHIP_FROM_PHONE") or "",
        }
        parcel = {
            "length": str(config.get("SHIPPO_PARCEL_LENGTH", "12")),
            "width": str(config.get("SHIPPO_PARCEL_WIDTH", "10")),
            "height": str(config.get("SHIPPO_PARCEL_HEIGHT", "3")),
            "distance_unit": "in",
            "weight": str(config.get("SHIPPO_PARCEL_WEIGHT", "1")),
            "mass_unit": "lb",
        }
        return cls(
            config.get("SHIPPO_API_KEY"),
            ship_from,
            parcel,
            default_service=config.get("SHIPPO_DEFAULT_SERVICE", "usps_first"),
            session=session,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.ship_from.get("street1") and self.ship_from.get("zip"))

    def _post(self, path, payload):
        try:
            resp = self.session.post(f"{SHIPPO_API}{path}", json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ShippingError(f"Shippo request failed: {e}") from e
        if resp.status_code >= 400:
            raise ShippingError(f"Shippo returned {resp.status_code}: {resp.text[:500]}")
        return resp.json()

    def create_label(self, order) -> ShippingLabel:
        if not self.configured:
            raise ShippingError("Shippo is not configured")
        shipment = self._post("/shipments/", {
            "address_from": self.ship_from,
            "address_to": {
                "name": order.customer_name,
                "street1": order.ship_street,
                "street2": order.ship_apt or "",
                "city": order.ship_city,
                "state": order.ship_state,
                "zip": order.ship_zip,
                "country": "US",
                "email": order.customer_email,
            },
            "parcels": [self.parcel],
            "async": False,
        })
        rates = shipment.get("rates") or []
        if not rates:
            raise ShippingError("No shipping rates available")
        rate = _pick_rate(rates, self.default_service)

        transaction = self._post("/transactions/", {
            "rate": rate["object_id"],
            "label_file_type": "PDF",
            "async": False,
        })
        if transaction.get("status") != "SUCCESS":
            raise ShippingError(f"Label creation failed: {transaction.get('messages')}")

        logger.info("Shipping label purchased for order %s via %s", order.id, rate.get("provider"))
        return ShippingLabel(
            label_url=transaction.get("label_url"),
            tracking_number=transaction.get("tracking_number"),
            tracking_url=transaction.get("tracking_url_provider"),
            carrier=rate.get("provider"),
            service=(rate.get("servicelevel") or {}).get("name"),
            cost=Decimal(str(rate["amount"])) if rate.get("amount") is not None else None,
            transaction_id=transaction.get("object_id"),
        )

from .payments import StripeGateway, ChargeResult
from .shipping import ShippoClient, ShippingLabel, ShippingError
from .ebay import EbayClient, EbayError


def init_integrations(app):
    """Build the collaborator clients once per app; tests replace them with fakes."""
    app.extensions["payment_gateway"] = StripeGateway.from_config(app.config)
    app.extensions["shipping_gateway"] = ShippoClient.from_config(app.config)
    app.extensions["ebay_client"] = EbayClient.from_config(app.config)


__all__ = [
    "StripeGateway",
    "ChargeResult",
    "ShippoClient",
    "ShippingLabel",
    "ShippingError",
    "EbayClient",
    "EbayError",
    "init_integrations",
]

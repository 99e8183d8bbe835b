import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import stripe

logger = logging.getLogger(__name__)


@dataclass
class ChargeResult:
    success: bool
    reference: Optional[str] = None
    error: Optional[str] = None


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1")))


class StripeGateway:
    """Charges a card through a confirmed PaymentIntent."""

    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    @classmethod
    def from_config(cls, config):
        return cls(config.get("STRIPE_SECRET_KEY"), config.get("STRIPE_CURRENCY", "usd"))

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def charge(self, amount: Decimal, payment_method_id: str, description: str = "", email: str = None) -> ChargeResult:
        if not self.configured:
            return ChargeResult(False, error="Payments are not configured")
        if not payment_method_id:
            return ChargeResult(False, error="A payment method is required")
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_cents(amount),
                currency=self.currency,
                payment_method=payment_method_id,
                confirm=True,
                description=description,
                receipt_email=email,
                automatic_payment_methods={"enabled": True, "allow_redirects": "never"},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe charge failed: %s", e)
            return ChargeResult(False, error=getattr(e, "user_message", None) or "Payment failed")
        if intent.status != "succeeded":
            logger.warning("Stripe PaymentIntent %s ended in status %s", intent.id, intent.status)
            return ChargeResult(False, reference=intent.id, error="Payment was not completed")
        return ChargeResult(True, reference=intent.id)

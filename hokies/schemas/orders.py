from typing import List, Optional
from pydantic import BaseModel


class ShippingAddress(BaseModel):
    street: str
    apt: Optional[str] = None
    city: str
    state: str
    zip: str


class CheckoutRequest(BaseModel):
    customer_name: str
    customer_email: str
    shipping_address: ShippingAddress
    item_ids: List[str]
    payment_method_id: Optional[str] = None


class OrderStatusRequest(BaseModel):
    status: str

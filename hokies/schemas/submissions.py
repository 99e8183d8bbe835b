from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel


class SubmissionRequest(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    item_type: str
    description: str
    condition: str
    era: Optional[str] = None
    photos: List[str] = []


class ReviewSubmissionRequest(BaseModel):
    price: Decimal
    notes: Optional[str] = None


class RejectSubmissionRequest(BaseModel):
    reason: Optional[str] = None

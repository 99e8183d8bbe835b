from typing import Optional
from pydantic import BaseModel


class SyndicatedListingRequest(BaseModel):
    title: str
    platform: str
    link: str
    price: Optional[str] = None
    image: Optional[str] = None
    active: bool = True


class UpdateSyndicatedListingRequest(BaseModel):
    title: Optional[str] = None
    platform: Optional[str] = None
    link: Optional[str] = None
    price: Optional[str] = None
    image: Optional[str] = None
    active: Optional[bool] = None


class ApprovalRequest(BaseModel):
    approved: bool

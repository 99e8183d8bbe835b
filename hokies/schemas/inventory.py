from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateItemRequest(BaseModel):
    name: str
    price: Decimal = Field(ge=0)
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    condition: Optional[str] = None
    available: bool = True
    images: List[str] = []


class UpdateItemRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    cost: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    condition: Optional[str] = None
    available: Optional[bool] = None
    images: Optional[List[str]] = None

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventRequest(BaseModel):
    name: str
    date: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None


class UpdateEventRequest(BaseModel):
    name: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel


class SaveDropRequest(BaseModel):
    name: str = ""
    description: Optional[str] = None
    item_ids: List[str] = []
    schedule_type: Optional[Literal["draft", "schedule", "now"]] = None
    scheduled_date: Optional[datetime] = None


class ScheduleDropRequest(BaseModel):
    scheduled_date: datetime

"""Calendar entry models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from models.reminder import ActionType


class Visit(BaseModel):
    """A call or visit placed on the calendar for a given day."""

    id: str
    customer_id: str
    customer_name: str = "Unknown customer"
    date: datetime
    type: ActionType = ActionType.VISIT
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class VisitInput(BaseModel):
    """Calendar form payload."""

    customer_id: Optional[str] = None
    date: Optional[datetime] = None
    type: ActionType = ActionType.VISIT
    notes: Optional[str] = None

"""Reminder models: recurring action types, urgency and derived reminders."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ActionType(str, Enum):
    """Recurring actions tracked per customer."""

    CALL = "call"
    VISIT = "visit"

    @property
    def interval_field(self) -> str:
        return f"{self.value}_interval_days"

    @property
    def last_field(self) -> str:
        return f"last_{self.value}_date"

    @property
    def next_field(self) -> str:
        return f"next_{self.value}_date"


class Urgency(str, Enum):
    """Where a reminder's due date sits relative to today."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    UNSCHEDULED = "unscheduled"


class Reminder(BaseModel):
    """One (customer, action) pair derived from a customer record."""

    id: str
    customer_id: str
    customer_name: str
    type: ActionType
    due_date: Optional[datetime] = None
    last_date: Optional[datetime] = None
    interval_days: int
    urgency: Urgency


class CompletionRequest(BaseModel):
    """Payload for marking a call or visit as done."""

    type: Optional[str] = None
    performed_at: Optional[datetime] = None


class CompletionResult(BaseModel):
    """Dates written back to the customer after a completion."""

    customer_id: str
    type: ActionType
    last_date: datetime
    next_date: datetime

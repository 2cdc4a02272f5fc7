"""Customer models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from models.reminder import ActionType


class Product(BaseModel):
    """Product a customer buys, with its typical volume."""

    id: Optional[str] = None
    customer_id: Optional[str] = None
    name: str
    average_tonnage: Optional[float] = 0.0


class Customer(BaseModel):
    """Customer record as stored, with its call/visit schedule."""

    id: str
    name: str
    company: Optional[str] = None
    address: Optional[str] = None
    sector: Optional[str] = None
    contact_person: Optional[str] = None
    call_interval_days: int = 7
    visit_interval_days: int = 30
    last_call_date: Optional[datetime] = None
    last_visit_date: Optional[datetime] = None
    next_call_date: Optional[datetime] = None
    next_visit_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    products: List[Product] = Field(default_factory=list)

    def interval_for(self, action: ActionType) -> int:
        return getattr(self, action.interval_field)

    def last_date_for(self, action: ActionType) -> Optional[datetime]:
        return getattr(self, action.last_field)

    def next_date_for(self, action: ActionType) -> Optional[datetime]:
        return getattr(self, action.next_field)


class ProductInput(BaseModel):
    """Product line submitted with the customer form."""

    name: str = ""
    average_tonnage: float = 0.0

    @field_validator("average_tonnage", mode="before")
    @classmethod
    def coerce_tonnage(cls, value):
        """Blank or unparsable tonnage counts as zero, as the form allows."""
        if value in (None, ""):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0


class CustomerInput(BaseModel):
    """Create/update payload from the customer form.

    Intervals stay raw here; the interval engine coerces them so the
    per-field defaults apply in one place.
    """

    name: str
    company: str
    address: Optional[str] = None
    sector: Optional[str] = None
    contact_person: Optional[str] = None
    call_interval_days: Optional[Union[int, str]] = None
    visit_interval_days: Optional[Union[int, str]] = None
    notes: Optional[str] = None
    products: List[ProductInput] = Field(default_factory=list)

    @field_validator("name", "company")
    @classmethod
    def validate_required(cls, value: str) -> str:
        """Name and company are the minimum needed to file a customer."""
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("name and company must be provided")
        return cleaned

"""Report and dashboard models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ReportEntry(BaseModel):
    """A customer line in the daily digest."""

    customer_id: str
    name: str
    company: Optional[str] = None
    date: Optional[datetime] = None


class DailyReport(BaseModel):
    """What happened yesterday and what is due today."""

    report_date: datetime
    yesterday_calls: List[ReportEntry] = Field(default_factory=list)
    yesterday_visits: List[ReportEntry] = Field(default_factory=list)
    today_calls: List[ReportEntry] = Field(default_factory=list)
    today_visits: List[ReportEntry] = Field(default_factory=list)


class ProductCount(BaseModel):
    name: str
    count: int


class Stats(BaseModel):
    """Headline numbers for the reports page."""

    total_customers: int
    total_calls: int
    total_visits: int
    top_products: List[ProductCount] = Field(default_factory=list)


class TodayTasks(BaseModel):
    """Calls and visits due today or earlier, for the dashboard."""

    calls: List[ReportEntry] = Field(default_factory=list)
    visits: List[ReportEntry] = Field(default_factory=list)

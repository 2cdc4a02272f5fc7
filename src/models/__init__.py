"""Pydantic models for API payloads."""

from models.calendar import Visit, VisitInput  # noqa: F401
from models.customer import Customer, CustomerInput, Product, ProductInput  # noqa: F401
from models.reminder import (  # noqa: F401
    ActionType,
    CompletionRequest,
    CompletionResult,
    Reminder,
    Urgency,
)
from models.report import DailyReport, ProductCount, ReportEntry, Stats, TodayTasks  # noqa: F401
from models.response import ApiResponse  # noqa: F401

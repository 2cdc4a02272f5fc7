"""Handlers for the visit calendar (GET/POST /visits)."""

from typing import Optional

from models.calendar import VisitInput
from models.response import ApiResponse
from utils.http import api_handler, json_response, parse_body, query_datetime

# Lazy-loaded service to avoid import-time DB connections
_calendar_service: Optional["CalendarService"] = None


def _get_calendar_service():
    """Lazy-load CalendarService."""
    global _calendar_service
    if _calendar_service is None:
        from repositories.db import get_record_store
        from services.calendar_service import CalendarService
        _calendar_service = CalendarService(get_record_store())
    return _calendar_service


@api_handler
def list_handler(event, context):
    """GET /visits?start=YYYY-MM-DD&end=YYYY-MM-DD"""
    visits = _get_calendar_service().list_visits(
        start=query_datetime(event, "start"),
        end=query_datetime(event, "end"),
    )
    return json_response(
        200,
        ApiResponse(
            message="Visits loaded",
            data=[v.model_dump(mode="json") for v in visits],
            count=len(visits),
        ),
    )


@api_handler
def create_handler(event, context):
    payload = VisitInput.model_validate(parse_body(event))
    visit = _get_calendar_service().schedule_visit(payload)
    return json_response(201, visit)

"""Handlers for GET /reminders and POST /reminders/{id}/complete."""

from typing import Optional

from models.reminder import CompletionRequest
from models.response import ApiResponse
from utils.http import api_handler, json_response, parse_body, path_param, query_param
from utils.logging_config import get_logger
from utils.session import get_current_user

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_reminder_service: Optional["ReminderService"] = None


def _get_reminder_service():
    """Lazy-load ReminderService."""
    global _reminder_service
    if _reminder_service is None:
        from repositories.db import get_record_store
        from services.reminder_service import ReminderService
        _reminder_service = ReminderService(get_record_store())
    return _reminder_service


@api_handler
def list_handler(event, context):
    """Return every call/visit reminder, soonest first."""
    reminders = _get_reminder_service().list_reminders(
        search=query_param(event, "search"),
        action_type=query_param(event, "type"),
    )
    return json_response(
        200,
        ApiResponse(
            message="Reminders loaded",
            data=[r.model_dump(mode="json") for r in reminders],
            count=len(reminders),
        ),
    )


@api_handler
def complete_handler(event, context):
    """Mark the reminder's call or visit as done today (or at performed_at)."""
    reminder_id = path_param(event, "id")
    request = CompletionRequest.model_validate(parse_body(event))

    result = _get_reminder_service().complete_reminder(reminder_id, request.performed_at)

    user = get_current_user(event) or {}
    logger.info(
        "Reminder completed",
        extra={"reminder_id": reminder_id, "user": user.get("email")},
    )
    return json_response(200, result)

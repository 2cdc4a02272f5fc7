"""Handlers for /customers routes, including recording a completed action."""

from typing import Optional

from models.customer import CustomerInput
from models.reminder import CompletionRequest
from models.response import ApiResponse
from utils.http import api_handler, json_response, parse_body, path_param, query_param
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded services to avoid import-time DB connections
_customer_service: Optional["CustomerService"] = None
_completion_service: Optional["CompletionService"] = None


def _get_customer_service():
    """Lazy-load CustomerService."""
    global _customer_service
    if _customer_service is None:
        from repositories.db import get_record_store
        from services.customer_service import CustomerService
        _customer_service = CustomerService(get_record_store())
    return _customer_service


def _get_completion_service():
    """Lazy-load CompletionService."""
    global _completion_service
    if _completion_service is None:
        from repositories.db import get_record_store
        from services.completion_service import CompletionService
        _completion_service = CompletionService(get_record_store())
    return _completion_service


@api_handler
def list_handler(event, context):
    """GET /customers?search=&due=call|visit"""
    customers = _get_customer_service().list_customers(
        search=query_param(event, "search"),
        due=query_param(event, "due"),
    )
    return json_response(
        200,
        ApiResponse(
            message="Customers loaded",
            data=[c.model_dump(mode="json") for c in customers],
            count=len(customers),
        ),
    )


@api_handler
def get_handler(event, context):
    customer = _get_customer_service().get_customer(path_param(event, "id"))
    return json_response(200, customer)


@api_handler
def create_handler(event, context):
    payload = CustomerInput.model_validate(parse_body(event))
    customer = _get_customer_service().create_customer(payload)
    return json_response(201, customer)


@api_handler
def update_handler(event, context):
    payload = CustomerInput.model_validate(parse_body(event))
    customer = _get_customer_service().update_customer(path_param(event, "id"), payload)
    return json_response(200, customer)


@api_handler
def delete_handler(event, context):
    customer_id = path_param(event, "id")
    _get_customer_service().delete_customer(customer_id)
    return json_response(200, {"status": "deleted", "id": customer_id})


@api_handler
def action_handler(event, context):
    """POST /customers/{id}/actions with {"type": "call"|"visit"}."""
    customer_id = path_param(event, "id")
    request = CompletionRequest.model_validate(parse_body(event))
    result = _get_completion_service().complete_by_id(
        customer_id, request.type, request.performed_at
    )
    return json_response(200, result)

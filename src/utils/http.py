"""Helpers shared by the API Gateway HTTP API handlers."""

import base64
import functools
import json
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.error_handling import AppError, ValidationError, to_response
from utils.logging_config import get_logger

logger = get_logger(__name__)


def json_response(status: int, body: Any) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    if isinstance(body, BaseModel):
        payload = body.model_dump_json()
    else:
        payload = json.dumps(body, default=str)
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": payload,
    }


def parse_body(event: dict) -> dict:
    """Decode the JSON request body (empty body reads as ``{}``)."""
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Request body is not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def path_param(event: dict, name: str) -> str:
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    return value


def query_param(event: dict, name: str) -> Optional[str]:
    return (event.get("queryStringParameters") or {}).get(name) or None


def query_datetime(event: dict, name: str) -> Optional[datetime]:
    raw = query_param(event, name)
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date, got {raw!r}") from None


def api_handler(func: Callable) -> Callable:
    """Turn domain and validation errors into JSON error responses."""

    @functools.wraps(func)
    def wrapper(event, context):
        try:
            return func(event, context)
        except AppError as exc:
            logger.warning(
                "Request rejected",
                extra={"handler": func.__name__, "status": exc.status_code, "error": str(exc)},
            )
            return to_response(exc)
        except PydanticValidationError as exc:
            return json_response(
                422,
                {"message": "Invalid request", "errors": json.loads(exc.json(include_url=False))},
            )
        except Exception:
            logger.exception("Unhandled error", extra={"handler": func.__name__})
            return json_response(500, {"message": "Internal server error"})

    return wrapper

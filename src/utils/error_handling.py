"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class StoreError(AppError):
    """Raised when the record store rejects a read or write."""

    def __init__(self, message: str = "Record store operation failed", status_code: int = 502):
        super().__init__(message, status_code=status_code)


class RecordNotFoundError(StoreError):
    """Raised when a record addressed by id does not exist."""

    def __init__(self, message: str = "Record not found"):
        super().__init__(message, status_code=404)


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"message": str(error), "status": "error"}),
    }

"""Common response wrapper."""

from typing import Any, Optional
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Envelope for list endpoints."""

    message: str
    data: Optional[Any] = None
    count: Optional[int] = None

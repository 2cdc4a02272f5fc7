"""
Interval engine.

Every next-due date in the application is computed here: take a reference
moment, drop its time of day (local clock), and add a whole number of days.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Callable, Union

from utils.error_handling import ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)

DateLike = Union[date, datetime]

# Fits the Postgres INTEGER column and keeps due dates far inside datetime.max.
MAX_INTERVAL_DAYS = 36_500


def normalize_to_midnight(value: DateLike) -> datetime:
    """Return naive local midnight of the day ``value`` falls on."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime(value.year, value.month, value.day)


def local_today(clock: Callable[[], datetime] = datetime.now) -> datetime:
    """Today's local midnight according to ``clock``."""
    return normalize_to_midnight(clock())


def compute_next_due_date(reference_date: DateLike, interval_days: int) -> datetime:
    """Due date ``interval_days`` calendar days after ``reference_date``."""
    if isinstance(interval_days, bool) or not isinstance(interval_days, int):
        raise ValidationError(f"Interval must be a whole number of days, got {interval_days!r}")
    if interval_days < 0:
        raise ValidationError(f"Interval must not be negative, got {interval_days}")
    try:
        return normalize_to_midnight(reference_date) + timedelta(days=interval_days)
    except OverflowError:
        raise ValidationError(f"Interval too large, got {interval_days} days") from None


def parse_interval(raw: Any, default: int) -> int:
    """
    Coerce a form-entered interval to whole days.

    Blank or unparsable input falls back to ``default``; a negative number
    is rejected rather than stored, as is one longer than
    ``MAX_INTERVAL_DAYS``.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default

    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.warning(
            "Unparsable interval, using default",
            extra={"raw_value": str(raw), "default": default},
        )
        return default

    if value < 0:
        raise ValidationError(f"Interval must not be negative, got {value}")
    if value > MAX_INTERVAL_DAYS:
        raise ValidationError(f"Interval must be at most {MAX_INTERVAL_DAYS} days, got {value}")
    return value

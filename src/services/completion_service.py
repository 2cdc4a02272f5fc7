"""
Completion writer.

Marking a call or visit as done stamps the last date with the day it was
performed and schedules the next one an interval later. Both dates of the
acted-upon type go to the store in a single update; the other type's dates
are never touched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Union

from models.customer import Customer
from models.reminder import ActionType, CompletionResult
from repositories.record_store import RecordStore, eq
from services.interval_service import compute_next_due_date, normalize_to_midnight
from utils.error_handling import RecordNotFoundError, ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)


def coerce_action(action_type: Union[ActionType, str, None]) -> ActionType:
    """Accept an ActionType or its string value."""
    try:
        return ActionType(action_type)
    except ValueError:
        raise ValidationError(f"Unknown action type: {action_type!r}") from None


def apply_completion(customer: Customer, result: CompletionResult) -> Customer:
    """Return a copy of ``customer`` carrying the completed dates."""
    return customer.model_copy(
        update={
            result.type.last_field: result.last_date,
            result.type.next_field: result.next_date,
        }
    )


class CompletionService:
    """Applies completed calls and visits to customer records."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def complete_action(
        self,
        customer: Customer,
        action_type: Union[ActionType, str],
        performed_at: Optional[datetime] = None,
    ) -> CompletionResult:
        """
        Record that ``action_type`` was performed for ``customer``.

        The customer object is left as it was; use ``apply_completion`` on
        the result for an updated copy. Store failures propagate as-is and
        mean nothing was written.
        """
        action = coerce_action(action_type)
        last_date = normalize_to_midnight(performed_at or self.clock())
        next_date = compute_next_due_date(last_date, customer.interval_for(action))

        self.store.update(
            "customers",
            customer.id,
            {action.last_field: last_date, action.next_field: next_date},
        )

        logger.info(
            "Action completed",
            extra={
                "customer_id": customer.id,
                "action": action.value,
                "next_date": next_date.isoformat(),
            },
        )
        return CompletionResult(
            customer_id=customer.id,
            type=action,
            last_date=last_date,
            next_date=next_date,
        )

    def complete_by_id(
        self,
        customer_id: str,
        action_type: Union[ActionType, str],
        performed_at: Optional[datetime] = None,
    ) -> CompletionResult:
        """Load the customer, then complete the action."""
        action = coerce_action(action_type)
        rows = self.store.select("customers", filters=[eq("id", customer_id)])
        if not rows:
            raise RecordNotFoundError(f"Customer {customer_id} not found")
        customer = Customer.model_validate(rows[0])
        return self.complete_action(customer, action, performed_at)

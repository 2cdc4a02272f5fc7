"""
Reminder projection.

Each customer yields one call reminder and one visit reminder, derived from
its next-due dates every time they are read. Reminders are never stored;
completing one updates the customer and the projection is simply re-run.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from models.customer import Customer
from models.reminder import ActionType, CompletionResult, Reminder, Urgency
from repositories.record_store import RecordStore
from services.completion_service import CompletionService
from services.interval_service import local_today, normalize_to_midnight
from utils.error_handling import ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)

NOT_SCHEDULED = "Not yet scheduled"

_CUSTOMER_COLUMNS = (
    "id",
    "name",
    "company",
    "call_interval_days",
    "visit_interval_days",
    "last_call_date",
    "last_visit_date",
    "next_call_date",
    "next_visit_date",
)


def classify_urgency(due_date: Optional[datetime], today: datetime) -> Urgency:
    """Place a due date relative to today, at day granularity."""
    if due_date is None:
        return Urgency.UNSCHEDULED
    due_day = normalize_to_midnight(due_date)
    today = normalize_to_midnight(today)
    if due_day < today:
        return Urgency.OVERDUE
    if due_day == today:
        return Urgency.DUE_TODAY
    return Urgency.UPCOMING


def build_reminder(customer: Customer, action: ActionType, today: datetime) -> Reminder:
    due_date = customer.next_date_for(action)
    return Reminder(
        id=f"{action.value}-{customer.id}",
        customer_id=customer.id,
        customer_name=customer.name,
        type=action,
        due_date=due_date,
        last_date=customer.last_date_for(action),
        interval_days=customer.interval_for(action),
        urgency=classify_urgency(due_date, today),
    )


class ReminderProjection:
    """Re-iterable view of the reminders for a fixed set of customers.

    The customer collection and ``today`` are captured once, so every pass
    yields the same reminders.
    """

    def __init__(self, customers: Iterable[Customer], today: datetime):
        self._customers: Tuple[Customer, ...] = tuple(customers)
        self.today = normalize_to_midnight(today)

    def __iter__(self) -> Iterator[Reminder]:
        for customer in self._customers:
            yield build_reminder(customer, ActionType.CALL, self.today)
            yield build_reminder(customer, ActionType.VISIT, self.today)

    def __len__(self) -> int:
        return 2 * len(self._customers)


def project_reminders(
    customers: Iterable[Customer], today: Optional[datetime] = None
) -> ReminderProjection:
    """Derive the call and visit reminders for every customer."""
    return ReminderProjection(customers, today if today is not None else local_today())


def _sort_key(reminder: Reminder):
    # Undated reminders go last; datetime.min only fills the unused slot.
    if reminder.due_date is None:
        return (1, datetime.min)
    return (0, normalize_to_midnight(reminder.due_date))


def sort_reminders(reminders: Iterable[Reminder]) -> List[Reminder]:
    """Soonest first, unscheduled last; ties keep their input order."""
    return sorted(reminders, key=_sort_key)


def filter_reminders(
    reminders: Iterable[Reminder],
    search: Optional[str] = None,
    action_type: Optional[ActionType] = None,
) -> List[Reminder]:
    """Narrow reminders by customer name substring and action type."""
    term = (search or "").strip().lower()
    return [
        r
        for r in reminders
        if (not term or term in r.customer_name.lower())
        and (action_type is None or r.type == action_type)
    ]


def format_due_date(value: Optional[datetime]) -> str:
    if value is None:
        return NOT_SCHEDULED
    return normalize_to_midnight(value).date().isoformat()


def parse_reminder_id(reminder_id: str) -> Tuple[ActionType, str]:
    """Split ``"call-<customer id>"`` into its action and customer id."""
    prefix, sep, customer_id = (reminder_id or "").partition("-")
    if not sep or not customer_id:
        raise ValidationError(f"Malformed reminder id: {reminder_id!r}")
    try:
        return ActionType(prefix), customer_id
    except ValueError:
        raise ValidationError(f"Unknown reminder type in id: {reminder_id!r}") from None


class ReminderService:
    """Reads customers from the store and serves their reminders."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self.completions = CompletionService(store, clock=clock)

    def list_reminders(
        self,
        search: Optional[str] = None,
        action_type: Optional[str] = None,
    ) -> List[Reminder]:
        """All reminders, sorted for display and optionally filtered."""
        action = None
        if action_type and action_type != "all":
            try:
                action = ActionType(action_type)
            except ValueError:
                raise ValidationError(f"Unknown reminder type: {action_type!r}") from None

        rows = self.store.select("customers", order_by="name", columns=_CUSTOMER_COLUMNS)
        customers = [Customer.model_validate(row) for row in rows]
        projection = project_reminders(customers, today=local_today(self.clock))
        reminders = sort_reminders(filter_reminders(projection, search, action))

        logger.info(
            "Reminders projected",
            extra={"customers": len(customers), "returned": len(reminders)},
        )
        return reminders

    def complete_reminder(
        self, reminder_id: str, performed_at: Optional[datetime] = None
    ) -> CompletionResult:
        """Mark the action behind a reminder as done."""
        action, customer_id = parse_reminder_id(reminder_id)
        return self.completions.complete_by_id(customer_id, action, performed_at)

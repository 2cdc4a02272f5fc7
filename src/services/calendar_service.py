"""Calendar service: calls and visits booked for a specific day."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List, Optional

from models.calendar import Visit, VisitInput
from repositories.record_store import Filter, RecordStore, eq
from services.interval_service import DateLike, normalize_to_midnight
from utils.error_handling import RecordNotFoundError
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)


class CalendarService:
    """Books and lists calendar entries."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def list_visits(
        self, start: Optional[DateLike] = None, end: Optional[DateLike] = None
    ) -> List[Visit]:
        """Entries from ``start`` (inclusive) to ``end`` (exclusive), by date."""
        filters: List[Filter] = []
        if start is not None:
            filters.append(Filter("date", "gte", normalize_to_midnight(start)))
        if end is not None:
            filters.append(Filter("date", "lt", normalize_to_midnight(end)))

        rows = self.store.select("visits", filters=filters, order_by="date")
        names = {
            row["id"]: row["name"]
            for row in self.store.select("customers", columns=("id", "name"))
        }
        return [
            Visit.model_validate(
                {**row, "customer_name": names.get(row["customer_id"], "Unknown customer")}
            )
            for row in rows
        ]

    def visits_on(self, day: DateLike) -> List[Visit]:
        start = normalize_to_midnight(day)
        return self.list_visits(start, start + timedelta(days=1))

    def schedule_visit(self, payload: VisitInput) -> Visit:
        """Put a call or visit on the calendar for a customer."""
        ensure_present(payload.customer_id, "customer_id")
        ensure_present(payload.date, "date")

        customers = self.store.select(
            "customers", filters=[eq("id", payload.customer_id)], columns=("id", "name")
        )
        if not customers:
            raise RecordNotFoundError(f"Customer {payload.customer_id} not found")

        day = normalize_to_midnight(payload.date)
        fields = {
            "customer_id": payload.customer_id,
            "date": day,
            "type": payload.type.value,
            "notes": payload.notes or "",
            "created_at": self.clock(),
        }
        visit_id = self.store.insert("visits", fields)
        logger.info(
            "Calendar entry booked",
            extra={"visit_id": visit_id, "customer_id": payload.customer_id},
        )
        return Visit(id=visit_id, customer_name=customers[0]["name"], **fields)

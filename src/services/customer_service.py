"""
Customer management service.

Creates, edits, lists and removes customers together with their product
lines. Schedules set here (initial next dates, re-scheduling after an
interval change) go through the interval engine like completions do.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from models.customer import Customer, CustomerInput, Product
from models.reminder import ActionType
from repositories.record_store import Filter, RecordStore, eq
from services.interval_service import compute_next_due_date, local_today, parse_interval
from utils.config import AppConfig
from utils.error_handling import RecordNotFoundError, ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class CustomerService:
    """Service for customer records and their products."""

    def __init__(
        self,
        store: RecordStore,
        config: Optional[AppConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.config = config or AppConfig.from_environment()
        self.clock = clock

    def list_customers(self, search: Optional[str] = None, due: Optional[str] = None) -> List[Customer]:
        """
        Customers ordered by name, with products attached.

        ``search`` matches name, company or any product name. ``due`` keeps
        only customers whose next call (or visit) is today or earlier.
        """
        filters: List[Filter] = []
        if due and due != "all":
            try:
                action = ActionType(due)
            except ValueError:
                raise ValidationError(f"Unknown due filter: {due!r}") from None
            filters.append(Filter(action.next_field, "lte", local_today(self.clock)))

        rows = self.store.select("customers", filters=filters, order_by="name")
        products_by_customer = self._products_by_customer()
        customers = [
            Customer.model_validate({**row, "products": products_by_customer.get(row["id"], [])})
            for row in rows
        ]

        term = (search or "").strip().lower()
        if term:
            customers = [c for c in customers if self._matches(c, term)]
        return customers

    def get_customer(self, customer_id: str) -> Customer:
        rows = self.store.select("customers", filters=[eq("id", customer_id)])
        if not rows:
            raise RecordNotFoundError(f"Customer {customer_id} not found")
        products = self.store.select("products", filters=[eq("customer_id", customer_id)], order_by="name")
        return Customer.model_validate({**rows[0], "products": products})

    def create_customer(self, payload: CustomerInput) -> Customer:
        """File a new customer with first call/visit due one interval from today."""
        today = local_today(self.clock)
        call_interval, visit_interval = self._intervals(payload)

        fields = self._profile_fields(payload)
        fields.update(
            {
                "call_interval_days": call_interval,
                "visit_interval_days": visit_interval,
                "last_call_date": None,
                "last_visit_date": None,
                "next_call_date": compute_next_due_date(today, call_interval),
                "next_visit_date": compute_next_due_date(today, visit_interval),
            }
        )
        with self.store.transaction() as tx:
            customer_id = tx.insert("customers", fields)
            self._insert_products(tx, customer_id, payload)

        logger.info("Customer created", extra={"customer_id": customer_id})
        return self.get_customer(customer_id)

    def update_customer(self, customer_id: str, payload: CustomerInput) -> Customer:
        """
        Save edits and replace the product list in one transaction.

        Next dates are re-derived from the last completed date (or today,
        if none) so they always reflect the current intervals.
        """
        existing = self.get_customer(customer_id)
        today = local_today(self.clock)
        call_interval, visit_interval = self._intervals(payload)

        fields = self._profile_fields(payload)
        fields.update(
            {
                "call_interval_days": call_interval,
                "visit_interval_days": visit_interval,
                "next_call_date": compute_next_due_date(
                    existing.last_call_date or today, call_interval
                ),
                "next_visit_date": compute_next_due_date(
                    existing.last_visit_date or today, visit_interval
                ),
            }
        )
        with self.store.transaction() as tx:
            tx.update("customers", customer_id, fields)
            tx.delete_where("products", [eq("customer_id", customer_id)])
            self._insert_products(tx, customer_id, payload)

        logger.info("Customer updated", extra={"customer_id": customer_id})
        return self.get_customer(customer_id)

    def delete_customer(self, customer_id: str) -> None:
        self.get_customer(customer_id)
        with self.store.transaction() as tx:
            tx.delete_where("products", [eq("customer_id", customer_id)])
            tx.delete_where("visits", [eq("customer_id", customer_id)])
            tx.delete("customers", customer_id)
        logger.info("Customer deleted", extra={"customer_id": customer_id})

    def _intervals(self, payload: CustomerInput):
        return (
            parse_interval(payload.call_interval_days, self.config.default_call_interval_days),
            parse_interval(payload.visit_interval_days, self.config.default_visit_interval_days),
        )

    @staticmethod
    def _profile_fields(payload: CustomerInput) -> Dict[str, Any]:
        return {
            "name": payload.name,
            "company": payload.company,
            "address": payload.address or "",
            "sector": payload.sector or "",
            "contact_person": payload.contact_person or "",
            "notes": payload.notes or "",
        }

    @staticmethod
    def _insert_products(store: RecordStore, customer_id: str, payload: CustomerInput) -> None:
        for product in payload.products:
            name = product.name.strip()
            if not name:
                continue
            store.insert(
                "products",
                {
                    "customer_id": customer_id,
                    "name": name,
                    "average_tonnage": product.average_tonnage,
                },
            )

    def _products_by_customer(self) -> Dict[str, List[Product]]:
        grouped: Dict[str, List[Product]] = {}
        for row in self.store.select("products", order_by="name"):
            grouped.setdefault(row["customer_id"], []).append(Product.model_validate(row))
        return grouped

    @staticmethod
    def _matches(customer: Customer, term: str) -> bool:
        if term in customer.name.lower():
            return True
        if customer.company and term in customer.company.lower():
            return True
        return any(term in p.name.lower() for p in customer.products)

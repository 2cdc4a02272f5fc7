"""
Completion writer tests: date arithmetic, field scoping and failure atomicity.

Run with: pytest tests/unit/test_completion_service.py -v
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from models.customer import Customer
from models.reminder import ActionType
from repositories.record_store import eq
from services.completion_service import CompletionService, apply_completion
from utils.error_handling import RecordNotFoundError, StoreError, ValidationError

PERFORMED_AT = datetime(2024, 6, 10, 16, 45)


class FailingUpdateStore:
    """Delegates reads to a real store but rejects every update."""

    def __init__(self, inner):
        self.inner = inner
        self.update_calls = 0

    def select(self, *args, **kwargs):
        return self.inner.select(*args, **kwargs)

    def update(self, table, record_id, fields):
        self.update_calls += 1
        raise StoreError("connection reset by peer")


class TestCompleteAction:
    def test_call_completion_sets_last_and_next(self, store, add_customer):
        customer = add_customer(
            call_interval_days=7,
            last_visit_date=datetime(2024, 5, 1),
            next_visit_date=datetime(2024, 5, 31),
        )

        result = CompletionService(store).complete_action(customer, ActionType.CALL, PERFORMED_AT)

        assert result.type == ActionType.CALL
        assert result.last_date == datetime(2024, 6, 10)
        assert result.next_date == datetime(2024, 6, 17)

        row = store.select("customers", [eq("id", customer.id)])[0]
        assert row["last_call_date"] == datetime(2024, 6, 10)
        assert row["next_call_date"] == datetime(2024, 6, 17)
        assert row["last_visit_date"] == datetime(2024, 5, 1)
        assert row["next_visit_date"] == datetime(2024, 5, 31)

    def test_visit_completion_uses_visit_interval(self, store, add_customer):
        customer = add_customer(call_interval_days=7, visit_interval_days=30)

        result = CompletionService(store).complete_action(customer, "visit", PERFORMED_AT)

        assert result.next_date == datetime(2024, 7, 10)
        row = store.select("customers", [eq("id", customer.id)])[0]
        assert row["last_call_date"] is None
        assert row["next_call_date"] is None

    def test_only_acted_upon_fields_are_written(self):
        store = MagicMock()
        customer = Customer(id="c-1", name="Ayse", call_interval_days=7)

        CompletionService(store).complete_action(customer, ActionType.CALL, PERFORMED_AT)

        store.update.assert_called_once_with(
            "customers",
            "c-1",
            {"last_call_date": datetime(2024, 6, 10), "next_call_date": datetime(2024, 6, 17)},
        )

    def test_defaults_to_clock_today(self):
        store = MagicMock()
        service = CompletionService(store, clock=lambda: datetime(2024, 6, 10, 8, 15))
        result = service.complete_action(Customer(id="c-1", name="Ayse"), "call")
        assert result.last_date == datetime(2024, 6, 10)

    def test_input_customer_is_not_mutated(self):
        customer = Customer(id="c-1", name="Ayse", call_interval_days=7)
        before = customer.model_dump()

        result = CompletionService(MagicMock()).complete_action(customer, "call", PERFORMED_AT)

        assert customer.model_dump() == before
        updated = apply_completion(customer, result)
        assert updated.last_call_date == datetime(2024, 6, 10)
        assert updated.next_call_date == datetime(2024, 6, 17)
        assert updated.last_visit_date == customer.last_visit_date

    def test_unknown_action_type_rejected_without_store_call(self):
        store = MagicMock()
        with pytest.raises(ValidationError):
            CompletionService(store).complete_action(Customer(id="c-1", name="Ayse"), "email")
        store.update.assert_not_called()

    def test_negative_interval_rejected_without_store_call(self):
        store = MagicMock()
        customer = Customer(id="c-1", name="Ayse", call_interval_days=-7)
        with pytest.raises(ValidationError):
            CompletionService(store).complete_action(customer, "call", PERFORMED_AT)
        store.update.assert_not_called()


class TestFailureLeavesRecordUnchanged:
    def test_store_failure_propagates_and_nothing_changes(self, store, add_customer):
        customer = add_customer(
            call_interval_days=7,
            last_call_date=datetime(2024, 6, 1),
            next_call_date=datetime(2024, 6, 8),
        )
        persisted_before = store.select("customers", [eq("id", customer.id)])[0]
        memory_before = customer.model_dump()
        failing = FailingUpdateStore(store)

        with pytest.raises(StoreError, match="connection reset"):
            CompletionService(failing).complete_action(customer, ActionType.CALL, PERFORMED_AT)

        assert failing.update_calls == 1
        assert customer.model_dump() == memory_before
        assert store.select("customers", [eq("id", customer.id)])[0] == persisted_before

    def test_missing_record_is_store_error(self, store):
        ghost = Customer(id="does-not-exist", name="Ghost")
        with pytest.raises(StoreError) as exc_info:
            CompletionService(store).complete_action(ghost, ActionType.VISIT, PERFORMED_AT)
        assert isinstance(exc_info.value, RecordNotFoundError)


class TestCompleteById:
    def test_loads_and_completes(self, store, add_customer):
        customer = add_customer(visit_interval_days=14)
        result = CompletionService(store).complete_by_id(customer.id, "visit", PERFORMED_AT)
        assert result.next_date == datetime(2024, 6, 24)

    def test_unknown_customer(self, store):
        with pytest.raises(RecordNotFoundError):
            CompletionService(store).complete_by_id("missing", "call", PERFORMED_AT)

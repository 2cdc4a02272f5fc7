"""
CalendarService tests.

Run with: pytest tests/unit/test_calendar_service.py -v
"""

from datetime import datetime

import pytest

from models.calendar import VisitInput
from models.reminder import ActionType
from services.calendar_service import CalendarService
from utils.error_handling import RecordNotFoundError, ValidationError


@pytest.fixture
def service(store, clock):
    return CalendarService(store, clock=clock)


def test_schedule_visit_normalizes_date(service, add_customer):
    customer = add_customer("Ayse")

    visit = service.schedule_visit(
        VisitInput(customer_id=customer.id, date=datetime(2024, 6, 12, 15, 30), notes="Bring samples")
    )

    assert visit.date == datetime(2024, 6, 12)
    assert visit.type == ActionType.VISIT
    assert visit.customer_name == "Ayse"
    assert visit.created_at == datetime(2024, 6, 10, 14, 30)
    assert service.list_visits()[0].id == visit.id


@pytest.mark.parametrize(
    "payload",
    [
        VisitInput(date=datetime(2024, 6, 12)),
        VisitInput(customer_id="c-1"),
        VisitInput(customer_id="  ", date=datetime(2024, 6, 12)),
    ],
)
def test_schedule_visit_requires_customer_and_date(service, payload):
    with pytest.raises(ValidationError):
        service.schedule_visit(payload)


def test_schedule_visit_unknown_customer(service):
    with pytest.raises(RecordNotFoundError):
        service.schedule_visit(VisitInput(customer_id="missing", date=datetime(2024, 6, 12)))


def test_list_visits_range_and_names(service, store, add_customer):
    ayse = add_customer("Ayse")
    burak = add_customer("Burak")
    service.schedule_visit(VisitInput(customer_id=burak.id, date=datetime(2024, 6, 20)))
    service.schedule_visit(VisitInput(customer_id=ayse.id, date=datetime(2024, 6, 5), type="call"))
    service.schedule_visit(VisitInput(customer_id=ayse.id, date=datetime(2024, 7, 2)))
    store.insert("visits", {"customer_id": "gone", "date": datetime(2024, 6, 21)})

    june = service.list_visits(datetime(2024, 6, 1), datetime(2024, 7, 1))

    assert [(v.customer_name, v.date.day) for v in june] == [
        ("Ayse", 5),
        ("Burak", 20),
        ("Unknown customer", 21),
    ]
    assert june[0].type == ActionType.CALL


def test_visits_on_single_day(service, add_customer):
    ayse = add_customer("Ayse")
    service.schedule_visit(VisitInput(customer_id=ayse.id, date=datetime(2024, 6, 12)))
    service.schedule_visit(VisitInput(customer_id=ayse.id, date=datetime(2024, 6, 13)))

    assert [v.date for v in service.visits_on(datetime(2024, 6, 12, 9))] == [datetime(2024, 6, 12)]

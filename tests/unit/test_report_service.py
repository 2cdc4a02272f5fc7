"""
ReportService tests with SQLite and a fake SES client.

Run with: pytest tests/unit/test_report_service.py -v
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from models.report import DailyReport, ReportEntry
from services.report_service import ReportService, format_report_email
from utils.config import AppConfig
from utils.error_handling import AppError, ValidationError


@pytest.fixture
def ses():
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "msg-1"}
    return client


@pytest.fixture
def service(store, config, ses, clock):
    return ReportService(store, config=config, ses_client=ses, clock=clock)


def test_stats_counts_and_top_products(service, store, add_customer):
    a = add_customer("Ayse", last_call_date=datetime(2024, 6, 1))
    b = add_customer("Burak", last_call_date=datetime(2024, 6, 2), last_visit_date=datetime(2024, 5, 1))
    add_customer("Cem")
    for customer_id, name in [
        (a.id, "Propane"), (b.id, "Propane"), (a.id, "Butane"),
        (b.id, "Ethylene"), (b.id, "Butane"), (a.id, "Propane"),
    ]:
        store.insert("products", {"customer_id": customer_id, "name": name})

    stats = service.get_stats()

    assert stats.total_customers == 3
    assert stats.total_calls == 2
    assert stats.total_visits == 1
    assert [(p.name, p.count) for p in stats.top_products] == [
        ("Propane", 3),
        ("Butane", 2),
        ("Ethylene", 1),
    ]


def test_today_tasks_include_overdue(service, add_customer):
    add_customer("Overdue", next_call_date=datetime(2024, 6, 3), next_visit_date=datetime(2024, 7, 1))
    add_customer("Today", next_call_date=datetime(2024, 6, 20), next_visit_date=datetime(2024, 6, 10))

    tasks = service.get_today_tasks()

    assert [e.name for e in tasks.calls] == ["Overdue"]
    assert [e.name for e in tasks.visits] == ["Today"]


def test_daily_report_splits_yesterday_and_today(service, add_customer):
    add_customer("Called", last_call_date=datetime(2024, 6, 9), next_call_date=datetime(2024, 6, 16))
    add_customer("Visited", last_visit_date=datetime(2024, 6, 9), next_visit_date=datetime(2024, 6, 10))
    add_customer("Stale", last_call_date=datetime(2024, 6, 8), next_call_date=datetime(2024, 6, 10))

    report = service.generate_daily_report()

    assert report.report_date == datetime(2024, 6, 10)
    assert [e.name for e in report.yesterday_calls] == ["Called"]
    assert [e.name for e in report.yesterday_visits] == ["Visited"]
    assert [e.name for e in report.today_calls] == ["Stale"]
    assert [e.name for e in report.today_visits] == ["Visited"]


def test_format_report_email_escapes_and_fills_empty_sections():
    report = DailyReport(
        report_date=datetime(2024, 6, 10),
        today_calls=[ReportEntry(customer_id="c-1", name="<Ayse>", company="A & B")],
    )

    html = format_report_email(report)

    assert "Daily customer report (2024-06-09)" in html
    assert "&lt;Ayse&gt; - A &amp; B" in html
    assert "No calls were made yesterday." in html
    assert "No customers need a visit today." in html


def test_send_daily_report_uses_ses(service, ses):
    service.send_daily_report()

    kwargs = ses.send_email.call_args.kwargs
    assert kwargs["Source"] == "crm@example.com"
    assert kwargs["Destination"] == {"ToAddresses": ["sales@example.com"]}
    assert kwargs["Message"]["Subject"]["Data"] == "Daily customer report (2024-06-10)"
    assert "<h2>" in kwargs["Message"]["Body"]["Html"]["Data"]


def test_send_daily_report_requires_recipient(store, ses, clock):
    service = ReportService(store, config=AppConfig(), ses_client=ses, clock=clock)
    with pytest.raises(ValidationError):
        service.send_daily_report()
    ses.send_email.assert_not_called()


def test_send_daily_report_surfaces_ses_failure(service, ses):
    ses.send_email.side_effect = RuntimeError("MessageRejected")
    with pytest.raises(AppError) as exc_info:
        service.send_daily_report()
    assert exc_info.value.status_code == 502

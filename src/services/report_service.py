"""
Reporting service.

Headline statistics, the dashboard's list of due work, and the daily digest
e-mailed each morning (yesterday's completed calls/visits plus today's due
ones). The digest goes out through Amazon SES.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from html import escape
from typing import Callable, List, Optional

import boto3

from models.reminder import ActionType
from models.report import DailyReport, ProductCount, ReportEntry, Stats, TodayTasks
from repositories.record_store import Filter, RecordStore, lte, not_null
from services.interval_service import local_today
from utils.config import AppConfig
from utils.error_handling import AppError, ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)

TOP_PRODUCT_LIMIT = 5


class ReportService:
    """Builds reports from customer and product records."""

    def __init__(
        self,
        store: RecordStore,
        config: Optional[AppConfig] = None,
        ses_client=None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.config = config or AppConfig.from_environment()
        self._ses = ses_client
        self.clock = clock

    @property
    def ses(self):
        if self._ses is None:
            self._ses = boto3.client("ses")
        return self._ses

    def get_stats(self) -> Stats:
        """Customer count, how many were ever called/visited, top products."""
        product_names = [row["name"] for row in self.store.select("products", columns=("name",))]
        top = Counter(product_names).most_common(TOP_PRODUCT_LIMIT)

        return Stats(
            total_customers=self.store.count("customers"),
            total_calls=self.store.count("customers", [not_null("last_call_date")]),
            total_visits=self.store.count("customers", [not_null("last_visit_date")]),
            top_products=[ProductCount(name=name, count=count) for name, count in top],
        )

    def get_today_tasks(self) -> TodayTasks:
        """Customers whose next call or visit is due today or overdue."""
        today = local_today(self.clock)
        return TodayTasks(
            calls=self._due_by(ActionType.CALL, today),
            visits=self._due_by(ActionType.VISIT, today),
        )

    def generate_daily_report(self) -> DailyReport:
        today = local_today(self.clock)
        yesterday = today - timedelta(days=1)
        return DailyReport(
            report_date=today,
            yesterday_calls=self._done_between(ActionType.CALL, yesterday, today),
            yesterday_visits=self._done_between(ActionType.VISIT, yesterday, today),
            today_calls=self._due_by(ActionType.CALL, today),
            today_visits=self._due_by(ActionType.VISIT, today),
        )

    def send_daily_report(self, recipient: Optional[str] = None) -> DailyReport:
        """Generate the digest and e-mail it; raises AppError if SES refuses."""
        recipient = recipient or self.config.report_recipient
        sender = self.config.report_sender or recipient
        if not recipient:
            raise ValidationError("No report recipient configured")

        report = self.generate_daily_report()
        subject = f"Daily customer report ({report.report_date.date().isoformat()})"
        try:
            resp = self.ses.send_email(
                Source=sender,
                Destination={"ToAddresses": [recipient]},
                Message={
                    "Subject": {"Data": subject},
                    "Body": {"Html": {"Data": format_report_email(report)}},
                },
            )
        except Exception as exc:
            logger.exception("Daily report e-mail failed", extra={"recipient": recipient})
            raise AppError(f"Failed to send daily report: {exc}", status_code=502) from exc

        logger.info(
            "Daily report sent",
            extra={"recipient": recipient, "message_id": resp.get("MessageId")},
        )
        return report

    def _due_by(self, action: ActionType, day: datetime) -> List[ReportEntry]:
        rows = self.store.select(
            "customers",
            filters=[lte(action.next_field, day)],
            order_by=action.next_field,
        )
        return [_entry(row, row[action.next_field]) for row in rows]

    def _done_between(self, action: ActionType, start: datetime, end: datetime) -> List[ReportEntry]:
        rows = self.store.select(
            "customers",
            filters=[
                Filter(action.last_field, "gte", start),
                Filter(action.last_field, "lt", end),
            ],
            order_by="name",
        )
        return [_entry(row, row[action.last_field]) for row in rows]


def _entry(row: dict, when: Optional[datetime]) -> ReportEntry:
    return ReportEntry(customer_id=row["id"], name=row["name"], company=row.get("company"), date=when)


def _section(title: str, entries: List[ReportEntry], empty_text: str) -> str:
    lines = [f"<h3>{title}</h3>"]
    if entries:
        lines.extend(
            f"<p>{escape(e.name)} - {escape(e.company or '')}</p>" for e in entries
        )
    else:
        lines.append(f"<p>{empty_text}</p>")
    return "\n".join(lines)


def format_report_email(report: DailyReport) -> str:
    """Render the digest as an HTML fragment."""
    yesterday = (report.report_date - timedelta(days=1)).date().isoformat()
    return "\n".join(
        [
            f"<h2>Daily customer report ({yesterday})</h2>",
            _section("Calls made yesterday", report.yesterday_calls, "No calls were made yesterday."),
            _section("Visits made yesterday", report.yesterday_visits, "No visits were made yesterday."),
            _section("Calls due today", report.today_calls, "No customers need a call today."),
            _section("Visits due today", report.today_visits, "No customers need a visit today."),
        ]
    )

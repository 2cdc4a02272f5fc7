"""
Scheduled morning digest, triggered by an EventBridge rule.

E-mails the daily report and pushes a short "due today" notification.
"""

import json

from repositories.db import get_record_store
from services.notification_service import NotificationService, build_daily_task_message
from services.report_service import ReportService
from utils.config import AppConfig
from utils.logging_config import get_logger

logger = get_logger(__name__)


def lambda_handler(event, context):
    """Send the digest e-mail (when a recipient is set) and the push notification."""
    config = AppConfig.from_environment()
    reports = ReportService(get_record_store(), config=config)

    tasks = reports.get_today_tasks()
    emailed = False
    if config.report_recipient:
        reports.send_daily_report()
        emailed = True

    notified = NotificationService(config=config).notify(
        "Daily Tasks",
        build_daily_task_message(len(tasks.calls), len(tasks.visits)),
    )

    logger.info(
        "Daily digest finished",
        extra={
            "calls_due": len(tasks.calls),
            "visits_due": len(tasks.visits),
            "emailed": emailed,
            "notified": notified,
        },
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "calls_due": len(tasks.calls),
                "visits_due": len(tasks.visits),
                "emailed": emailed,
                "notified": notified,
            }
        ),
    }

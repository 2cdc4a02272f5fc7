"""Push notifications for the sales team, delivered through an SNS topic."""

from __future__ import annotations

from typing import Optional

import boto3

from utils.config import AppConfig
from utils.logging_config import get_logger

logger = get_logger(__name__)


def build_daily_task_message(calls: int, visits: int) -> str:
    return f"You have {calls} calls and {visits} visits scheduled for today."


class NotificationService:
    """Publishes short title/body notifications."""

    def __init__(self, config: Optional[AppConfig] = None, sns_client=None):
        self.config = config or AppConfig.from_environment()
        self._sns = sns_client

    @property
    def sns(self):
        if self._sns is None:
            self._sns = boto3.client("sns")
        return self._sns

    def notify(self, title: str, body: str) -> bool:
        """Publish a notification; returns False when no topic is configured."""
        topic_arn = self.config.notification_topic_arn
        if not topic_arn:
            logger.info("Notification skipped, no topic configured", extra={"title": title})
            return False

        resp = self.sns.publish(TopicArn=topic_arn, Subject=title[:100], Message=body)
        logger.info(
            "Notification published",
            extra={"title": title, "message_id": resp.get("MessageId")},
        )
        return True

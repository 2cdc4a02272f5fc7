from unittest.mock import MagicMock

from services.notification_service import NotificationService, build_daily_task_message
from utils.config import AppConfig


def test_daily_task_message():
    assert build_daily_task_message(3, 1) == "You have 3 calls and 1 visits scheduled for today."


def test_notify_publishes_to_topic(config):
    sns = MagicMock()
    sns.publish.return_value = {"MessageId": "m-1"}

    assert NotificationService(config=config, sns_client=sns).notify("Daily Tasks", "body") is True
    sns.publish.assert_called_once_with(
        TopicArn="arn:aws:sns:eu-west-2:123456789012:daily-tasks",
        Subject="Daily Tasks",
        Message="body",
    )


def test_notify_without_topic_is_skipped():
    sns = MagicMock()
    assert NotificationService(config=AppConfig(), sns_client=sns).notify("t", "b") is False
    sns.publish.assert_not_called()

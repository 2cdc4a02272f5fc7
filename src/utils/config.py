"""
Runtime configuration for the Lambda handlers.

Mirrors the infrastructure settings: a dataclass with safe local defaults,
populated from the environment the stack injects.
"""

from dataclasses import dataclass
from typing import Optional
import os


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class AppConfig:
    """Application settings consumed by services."""

    environment: str = "dev"

    # Database: explicit URL wins over the RDS secret.
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None

    # Interval defaults applied when a form value is blank or unparsable.
    default_call_interval_days: int = 7
    default_visit_interval_days: int = 30

    # Daily digest delivery
    report_recipient: Optional[str] = None
    report_sender: Optional[str] = None
    notification_topic_arn: Optional[str] = None

    @classmethod
    def from_environment(cls) -> "AppConfig":
        """Load settings from environment variables."""
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            default_call_interval_days=_int_from_env("DEFAULT_CALL_INTERVAL_DAYS", 7),
            default_visit_interval_days=_int_from_env("DEFAULT_VISIT_INTERVAL_DAYS", 30),
            report_recipient=os.environ.get("REPORT_RECIPIENT") or None,
            report_sender=os.environ.get("REPORT_SENDER") or None,
            notification_topic_arn=os.environ.get("NOTIFICATION_TOPIC_ARN") or None,
        )

"""
Environment-specific configuration settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
from typing import Optional
import os


@dataclass
class Settings:
    """Application settings with cost-optimized defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region

    # Database Configuration (Cost-optimized)
    db_instance_class: str = "t3.micro"  # Free tier eligible
    db_allocated_storage: int = 20  # Minimum GB
    db_name: str = "crm"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 15
    lambda_architecture: str = "ARM_64"  # 20% cheaper

    # Reminder defaults handed to the API Lambda
    default_call_interval_days: int = 7
    default_visit_interval_days: int = 30

    # Daily digest: EventBridge cron fields (UTC) and delivery addresses
    digest_hour_utc: int = 6
    digest_minute_utc: int = 0
    report_recipient: Optional[str] = None
    report_sender: Optional[str] = None

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        overrides = dict(
            environment=env,
            report_recipient=os.environ.get("REPORT_RECIPIENT") or None,
            report_sender=os.environ.get("REPORT_SENDER") or None,
        )
        if os.environ.get("DIGEST_HOUR_UTC"):
            overrides["digest_hour_utc"] = int(os.environ["DIGEST_HOUR_UTC"])

        # Production overrides
        if env == "prod":
            return cls(
                db_instance_class="t3.small",  # Upgrade for prod
                db_allocated_storage=50,
                lambda_memory_mb=512,
                lambda_timeout_seconds=30,
                **overrides,
            )

        return cls(**overrides)

"""
Pytest configuration and shared fixtures.

Puts src/ on sys.path so imports read ``from services import ...`` exactly
as they do inside the deployed Lambda, where src/ is the package root.
Database-backed tests run against an in-memory SQLite engine.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import boto3
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing."""
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    # Add repo root first (for imports like infrastructure.*)
    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    # Add src/ for Lambda-style imports (from handlers import ...)
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

boto3.setup_default_session(region_name="eu-west-2")

from models.customer import Customer  # noqa: E402
from repositories.record_store import SqlRecordStore, eq  # noqa: E402
from repositories.schema import create_schema  # noqa: E402
from utils.config import AppConfig  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return SqlRecordStore(engine)


@pytest.fixture
def clock():
    """Fixed 'now' of 2024-06-10 14:30 local time."""
    return lambda: datetime(2024, 6, 10, 14, 30)


@pytest.fixture
def config():
    return AppConfig(
        report_recipient="sales@example.com",
        report_sender="crm@example.com",
        notification_topic_arn="arn:aws:sns:eu-west-2:123456789012:daily-tasks",
    )


@pytest.fixture
def add_customer(store):
    """Insert a customer row and return it as a model."""

    def _add(name="Acme Buyer", **fields) -> Customer:
        row = {
            "name": name,
            "company": fields.pop("company", f"{name} Ltd"),
            "call_interval_days": fields.pop("call_interval_days", 7),
            "visit_interval_days": fields.pop("visit_interval_days", 30),
            **fields,
        }
        customer_id = store.insert("customers", row)
        return Customer.model_validate(store.select("customers", [eq("id", customer_id)])[0])

    return _add

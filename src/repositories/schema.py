"""Table definitions for the CRM database (SQLAlchemy Core)."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("company", String(255)),
    Column("address", Text),
    Column("sector", String(255)),
    Column("contact_person", String(255)),
    Column("call_interval_days", Integer, nullable=False, default=7),
    Column("visit_interval_days", Integer, nullable=False, default=30),
    Column("last_call_date", DateTime),
    Column("last_visit_date", DateTime),
    Column("next_call_date", DateTime),
    Column("next_visit_date", DateTime),
    Column("notes", Text),
    Column("created_at", DateTime, default=datetime.now),
)

products = Table(
    "products",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("customer_id", String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("average_tonnage", Float, default=0.0),
)

visits = Table(
    "visits",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("customer_id", String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
    Column("date", DateTime, nullable=False),
    Column("type", String(16), nullable=False, default="visit"),
    Column("notes", Text),
    Column("created_at", DateTime, default=datetime.now),
)


def create_schema(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)

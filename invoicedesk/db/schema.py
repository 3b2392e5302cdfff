# invoicedesk/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, Date, ForeignKey, CheckConstraint, Text, insert, select
)
from sqlalchemy.engine import Engine

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("image_url", Text, nullable=False),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("customer_id", String(36), ForeignKey("customers.id"), nullable=False),
    Column("project_name", Text, nullable=True),
    Column("amount", Integer, nullable=False),
    Column("remaining", Integer, nullable=True),
    Column("progress", Numeric(5, 2), nullable=True),
    Column("status", String(16), nullable=False),
    Column("date", Date, nullable=False),
    CheckConstraint("amount >= 0", name="ck_invoices_amount_nonneg"),
    CheckConstraint("remaining >= 0", name="ck_invoices_remaining_nonneg"),
    CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
)

# One row per calendar month label, independent of year. Amounts in cents.
revenue = Table(
    "revenue",
    metadata,
    Column("month", String(3), primary_key=True),
    Column("revenue", Integer, nullable=False, default=0),
)

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("password", Text, nullable=False),
)


def seed_revenue(engine: Engine) -> None:
    """Insert any of the twelve monthly buckets that are missing, at zero."""
    with engine.begin() as conn:
        existing = set(conn.execute(select(revenue.c.month)).scalars())
        missing = [
            {"month": label, "revenue": 0}
            for label in MONTH_LABELS
            if label not in existing
        ]
        if missing:
            conn.execute(insert(revenue), missing)


def create_schema(engine: Engine, drop_existing: bool = False) -> None:
    if drop_existing:
        metadata.drop_all(engine)
    metadata.create_all(engine)
    seed_revenue(engine)

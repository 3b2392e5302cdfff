"""
Shared fixtures: a fresh SQLite file database per test with the twelve
revenue buckets seeded, and services wired to a fixed "today".
"""

from datetime import date

import pytest
from sqlalchemy import insert, select

from invoicedesk.config import Settings
from invoicedesk.db.engine import build_engine
from invoicedesk.db.schema import create_schema, customers, invoices
from invoicedesk.navigation import ViewCache
from invoicedesk.services.customers import CustomerService
from invoicedesk.services.invoices import InvoiceService
from invoicedesk.services.ledger import RevenueLedger

FIXED_TODAY = date(2024, 7, 15)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'invoicedesk.db'}")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def views():
    return ViewCache()


@pytest.fixture
def ledger(engine):
    return RevenueLedger(engine)


@pytest.fixture
def invoice_service(engine, views, settings):
    return InvoiceService(engine, views, settings, today=lambda: FIXED_TODAY)


@pytest.fixture
def customer_service(engine, views, settings):
    return CustomerService(engine, views, settings)


@pytest.fixture
def customer_id(engine):
    with engine.begin() as conn:
        conn.execute(
            insert(customers).values(
                id="c1",
                name="Ada Lovelace",
                email="ada@lovelace.io",
                image_url="/customers/user.png",
            )
        )
    return "c1"


@pytest.fixture
def invoice_rows(engine):
    def _rows():
        with engine.connect() as conn:
            return conn.execute(select(invoices).order_by(invoices.c.date)).mappings().all()

    return _rows


@pytest.fixture
def customer_rows(engine):
    def _rows():
        with engine.connect() as conn:
            return conn.execute(select(customers).order_by(customers.c.name)).mappings().all()

    return _rows

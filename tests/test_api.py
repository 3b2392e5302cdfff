from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from invoicedesk.api.deps import view_cache
from invoicedesk.config import get_settings
from invoicedesk.db.engine import get_engine
from invoicedesk.db.schema import create_schema, customers, invoices
from invoicedesk.main import app
from invoicedesk.services.credentials import add_user


@pytest.fixture
def db_engine(tmp_path, monkeypatch):
    monkeypatch.setenv("INVOICEDESK_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    get_settings.cache_clear()
    engine = get_engine()
    create_schema(engine)
    view_cache.clear()
    yield engine
    engine.dispose()
    view_cache.clear()
    get_settings.cache_clear()


@pytest.fixture
def client(db_engine):
    return TestClient(app)


@pytest.fixture
def customer(db_engine):
    with db_engine.begin() as conn:
        conn.execute(
            insert(customers).values(
                id="c1", name="Ada Lovelace", email="ada@lovelace.io", image_url="/customers/user.png"
            )
        )
    return "c1"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_customer_redirects_to_listing(client):
    resp = client.post(
        "/dashboard/customers/",
        data={"name": "Grace Hopper", "email": "grace@navy.mil"},
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/customers"

    listing = client.get("/dashboard/customers/").json()
    assert [c["name"] for c in listing] == ["Grace Hopper"]


def test_create_customer_validation_errors(client):
    resp = client.post("/dashboard/customers/", data={"name": "", "email": "a@b.com"})

    assert resp.status_code == 422
    assert resp.json() == {
        "errors": {"name": ["Please enter a valid customer name."]},
        "message": "Missing Fields. Failed to Create Customer.",
    }


def test_paid_invoice_shows_in_listing_and_revenue(client, customer):
    resp = client.post(
        "/dashboard/invoices/",
        data={
            "customerId": customer,
            "project": "Analytical engine",
            "amount": "50.00",
            "date": "2024-03-05",
            "status": "paid",
        },
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/invoices"

    listing = client.get("/dashboard/invoices/").json()
    assert len(listing) == 1
    assert listing[0]["customer_name"] == "Ada Lovelace"
    assert listing[0]["amount"] == 5000

    revenue = {b["month"]: b["revenue"] for b in client.get("/dashboard/revenue").json()}
    assert revenue["Mar"] == 5000

    summary = client.get("/dashboard/").json()
    assert summary["total_paid"] == 5000
    assert summary["total_pending"] == 0
    assert summary["invoice_count"] == 1
    assert summary["customer_count"] == 1


def test_invoice_validation_errors(client, customer):
    resp = client.post("/dashboard/invoices/", data={"amount": "ten", "status": "paid"})

    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "Missing Fields. Failed to Create Invoice."
    assert body["errors"]["customerId"] == ["Please select a customer."]
    assert body["errors"]["amount"] == ["Please enter a valid number."]


def test_invoice_update_failure_does_not_redirect(client, customer, db_engine):
    with db_engine.begin() as conn:
        conn.execute(
            insert(invoices).values(
                id="i1", customer_id=customer, amount=100, status="pending", date=date(2024, 1, 1)
            )
        )

    resp = client.post(
        "/dashboard/invoices/i1",
        data={"customerId": "ghost", "project": "x", "amount": "1", "date": "2024-01-01", "status": "pending"},
        follow_redirects=False,
    )

    assert resp.status_code == 422
    assert resp.json() == {"errors": None, "message": "Database Error: Failed to Update Invoice."}


def test_listing_is_cached_until_revalidated(client, customer, db_engine):
    assert client.get("/dashboard/invoices/").json() == []

    # written behind the service's back, so nothing revalidates
    with db_engine.begin() as conn:
        conn.execute(
            insert(invoices).values(
                id="i1", customer_id=customer, amount=100, status="pending", date=date(2024, 1, 1)
            )
        )
    assert client.get("/dashboard/invoices/").json() == []

    assert client.delete("/dashboard/invoices/does-not-exist").status_code == 204
    assert [i["id"] for i in client.get("/dashboard/invoices/").json()] == ["i1"]


def test_missing_records_are_404(client):
    assert client.get("/dashboard/invoices/nope").status_code == 404
    assert client.get("/dashboard/customers/nope").status_code == 404


def test_login(client, db_engine):
    add_user(db_engine, "Admin", "admin@invoicedesk.io", "s3cret-pass")

    ok = client.post(
        "/login",
        data={"email": "admin@invoicedesk.io", "password": "s3cret-pass"},
        follow_redirects=False,
    )
    assert ok.status_code == 303
    assert ok.headers["location"] == "/dashboard"

    bad = client.post("/login", data={"email": "admin@invoicedesk.io", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json() == {"message": "Invalid credentials."}

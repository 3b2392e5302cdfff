from datetime import date
from decimal import Decimal

from invoicedesk.models.invoices import InvoiceFieldPolicy, InvoiceStatus
from invoicedesk.services.customers import validate_customer
from invoicedesk.services.invoices import validate_invoice
from invoicedesk.validation import Err, Ok

DEFAULT_POLICY = InvoiceFieldPolicy()


def _invoice_form(**overrides):
    form = {
        "customerId": "c1",
        "project": "Website redesign",
        "amount": "50.00",
        "remaining": "10.50",
        "progress": "40",
        "date": "2024-03-05",
        "status": "paid",
    }
    form.update(overrides)
    return form


def test_valid_invoice_is_typed():
    result = validate_invoice(_invoice_form(), DEFAULT_POLICY)

    assert isinstance(result, Ok)
    form = result.value
    assert form.customer_id == "c1"
    assert form.project_name == "Website redesign"
    assert form.amount == Decimal("50.00")
    assert form.amount_cents == 5000
    assert form.remaining_cents == 1050
    assert form.progress == Decimal("40")
    assert form.invoice_date == date(2024, 3, 5)
    assert form.status is InvoiceStatus.PAID


def test_missing_customer_is_a_field_error_not_an_exception():
    form = _invoice_form()
    del form["customerId"]

    result = validate_invoice(form, DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert result.errors == {"customerId": ["Please select a customer."]}


def test_blank_values_count_as_missing():
    result = validate_invoice(_invoice_form(customerId="", project="   "), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert set(result.errors) == {"customerId", "project"}


def test_every_failing_field_is_reported():
    result = validate_invoice(
        _invoice_form(amount="abc", status="overdue", progress="150", date="05/03/2024"),
        DEFAULT_POLICY,
    )

    assert isinstance(result, Err)
    assert result.errors == {
        "amount": ["Please enter a valid number."],
        "status": ["Please select an invoice status."],
        "progress": ["Please enter a percentage less or equal to 100%"],
        "date": ["Please enter a valid date (YYYY-MM-DD)."],
    }


def test_non_finite_amount_is_rejected():
    result = validate_invoice(_invoice_form(amount="NaN"), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert result.errors["amount"] == ["Please enter a valid number."]


def test_negative_numbers_are_rejected():
    result = validate_invoice(_invoice_form(amount="-1", remaining="-0.01", progress="-5"), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert result.errors["amount"] == ["Please enter an amount greater or equal than $0."]
    assert result.errors["remaining"] == ["Please enter an amount greater or equal than $0."]
    assert result.errors["progress"] == ["Please enter a correct percentage (%) value"]


def test_zero_amount_depends_on_policy():
    assert isinstance(validate_invoice(_invoice_form(amount="0"), DEFAULT_POLICY), Ok)

    strict = InvoiceFieldPolicy(amount_positive=True)
    result = validate_invoice(_invoice_form(amount="0"), strict)
    assert isinstance(result, Err)
    assert result.errors["amount"] == ["Please enter an amount greater than $0."]


def test_missing_amount_uses_policy_message():
    strict = InvoiceFieldPolicy(amount_positive=True)
    result = validate_invoice(_invoice_form(amount=None), strict)

    assert isinstance(result, Err)
    assert result.errors["amount"] == ["Please enter an amount greater than $0."]


def test_optional_fields_follow_policy():
    form = _invoice_form()
    for name in ("remaining", "progress", "date"):
        del form[name]

    lenient = InvoiceFieldPolicy(required=frozenset({"project"}))
    result = validate_invoice(form, lenient)
    assert isinstance(result, Ok)
    assert result.value.remaining_cents is None
    assert result.value.invoice_date is None

    strict = InvoiceFieldPolicy(required=frozenset({"project", "remaining", "progress", "date"}))
    result = validate_invoice(form, strict)
    assert isinstance(result, Err)
    assert set(result.errors) == {"remaining", "progress", "date"}


def test_status_must_match_exactly():
    result = validate_invoice(_invoice_form(status="PAID"), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert "status" in result.errors


def test_cents_round_half_up():
    result = validate_invoice(_invoice_form(amount="19.995"), DEFAULT_POLICY)

    assert result.value.amount_cents == 2000


def test_customer_with_empty_name_fails():
    result = validate_customer({"name": "", "email": "a@b.com"})

    assert isinstance(result, Err)
    assert result.errors == {"name": ["Please enter a valid customer name."]}


def test_customer_email_syntax_is_checked():
    result = validate_customer({"name": "Ada", "email": "not-an-address"})

    assert isinstance(result, Err)
    assert result.errors == {"email": ["Please enter a valid email address."]}


def test_valid_customer():
    result = validate_customer({"name": " Ada Lovelace ", "email": "ada@lovelace.io"})

    assert isinstance(result, Ok)
    assert result.value.customer_name == "Ada Lovelace"
    assert result.value.email == "ada@lovelace.io"


def test_amount_too_large_for_storage_is_a_field_error():
    result = validate_invoice(_invoice_form(amount="100000000000000000", remaining="1e999999"), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert result.errors == {
        "amount": ["Please enter a smaller amount."],
        "remaining": ["Please enter a smaller amount."],
    }


def test_amount_overflowing_decimal_context_is_a_field_error():
    result = validate_invoice(_invoice_form(amount="1e999999"), DEFAULT_POLICY)

    assert isinstance(result, Err)
    assert result.errors == {"amount": ["Please enter a smaller amount."]}


def test_largest_storable_amount_is_accepted():
    result = validate_invoice(_invoice_form(amount="92233720368547758.07"), DEFAULT_POLICY)

    assert isinstance(result, Ok)
    assert result.value.amount_cents == 2 ** 63 - 1

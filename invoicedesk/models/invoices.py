# invoicedesk/models/invoices.py

import datetime as dt
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, DecimalException, ROUND_HALF_UP
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from invoicedesk.validation import custom_error, parse_decimal, require_text

INVOICE_FIELDS = ("customerId", "project", "amount", "remaining", "progress", "date", "status")
ALWAYS_REQUIRED = frozenset({"customerId", "amount", "status"})

INVOICE_MESSAGES = {
    "customerId": "Please select a customer.",
    "project": "Please enter a project name or description.",
    "amount": "Please enter an amount greater or equal than $0.",
    "remaining": "Please enter an amount greater or equal than $0.",
    "progress": "Please enter a correct percentage (%) value",
    "date": "Please enter a valid date (YYYY-MM-DD).",
    "status": "Please select an invoice status.",
}
POSITIVE_AMOUNT_MESSAGE = "Please enter an amount greater than $0."
PROGRESS_TOO_HIGH_MESSAGE = "Please enter a percentage less or equal to 100%"
TOO_LARGE_MESSAGE = "Please enter a smaller amount."

# cents are stored in a signed 64-bit INTEGER column
MAX_CENTS = 2 ** 63 - 1


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class InvoiceFieldPolicy:
    """Which optional invoice fields a deployment insists on."""

    required: FrozenSet[str] = frozenset({"project", "date"})
    amount_positive: bool = False

    def required_fields(self) -> FrozenSet[str]:
        return ALWAYS_REQUIRED | self.required

    def messages(self) -> Dict[str, str]:
        messages = dict(INVOICE_MESSAGES)
        if self.amount_positive:
            messages["amount"] = POSITIVE_AMOUNT_MESSAGE
        return messages


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def checked_cents(amount: Decimal) -> int:
    """Cents for a validated amount, as a form error when it cannot be stored."""
    try:
        cents = to_cents(amount)
    except DecimalException:
        raise custom_error(TOO_LARGE_MESSAGE)
    if cents > MAX_CENTS:
        raise custom_error(TOO_LARGE_MESSAGE)
    return cents


class InvoiceForm(BaseModel):
    """
    Validated invoice input, shared by create and update.

    Every field is optional at the model level; presence is enforced by the
    :class:`InvoiceFieldPolicy` passed to the validation pipeline.
    """

    model_config = ConfigDict(populate_by_name=True)

    customer_id: Optional[str] = Field(default=None, alias="customerId")
    project_name: Optional[str] = Field(default=None, alias="project")
    amount: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    progress: Optional[Decimal] = None
    invoice_date: Optional[date] = Field(default=None, alias="date")
    status: Optional[InvoiceStatus] = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _check_customer(cls, value):
        return require_text(value, INVOICE_MESSAGES["customerId"])

    @field_validator("project_name", mode="before")
    @classmethod
    def _check_project(cls, value):
        return require_text(value, INVOICE_MESSAGES["project"])

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value, info: ValidationInfo):
        amount = parse_decimal(value)
        if (info.context or {}).get("amount_positive"):
            if amount <= 0:
                raise custom_error(POSITIVE_AMOUNT_MESSAGE)
        elif amount < 0:
            raise custom_error(INVOICE_MESSAGES["amount"])
        checked_cents(amount)
        return amount

    @field_validator("remaining", mode="before")
    @classmethod
    def _check_remaining(cls, value):
        remaining = parse_decimal(value)
        if remaining < 0:
            raise custom_error(INVOICE_MESSAGES["remaining"])
        checked_cents(remaining)
        return remaining

    @field_validator("progress", mode="before")
    @classmethod
    def _check_progress(cls, value):
        progress = parse_decimal(value)
        if progress < 0:
            raise custom_error(INVOICE_MESSAGES["progress"])
        if progress > 100:
            raise custom_error(PROGRESS_TOO_HIGH_MESSAGE)
        return progress

    @field_validator("invoice_date", mode="before")
    @classmethod
    def _check_date(cls, value):
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise custom_error(INVOICE_MESSAGES["date"])
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise custom_error(INVOICE_MESSAGES["date"])

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value):
        if value not in (InvoiceStatus.PENDING.value, InvoiceStatus.PAID.value):
            raise custom_error(INVOICE_MESSAGES["status"])
        return InvoiceStatus(value)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)

    @property
    def remaining_cents(self) -> Optional[int]:
        if self.remaining is None:
            return None
        return to_cents(self.remaining)


class InvoiceState(BaseModel):
    """What an invoice form gets back when a mutation does not navigate away."""

    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None


class InvoiceOut(BaseModel):
    id: str
    customer_id: str
    customer_name: str
    customer_email: str
    project_name: Optional[str] = None
    amount: int
    remaining: Optional[int] = None
    progress: Optional[Decimal] = None
    status: InvoiceStatus
    date: dt.date

    class Config:
        from_attributes = True

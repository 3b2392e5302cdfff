# invoicedesk/services/invoices.py

"""
Invoice create/update/delete.

Each mutation validates the submitted form, reads the revenue bucket for the
attribution month, writes the invoice row, and (only for ``paid`` invoices)
writes the bucket back as ``previous + submitted amount``. The three store
statements are independent; there is no transaction around them.

Store failures are handled differently per operation:

* create logs the error and still navigates to the invoice listing;
* update returns an :class:`InvoiceState` message and does not navigate;
* delete logs the error and returns nothing.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from invoicedesk.config import AttributionMode, Settings
from invoicedesk.db.schema import customers, invoices
from invoicedesk.models.invoices import (
    INVOICE_FIELDS,
    InvoiceFieldPolicy,
    InvoiceForm,
    InvoiceOut,
    InvoiceState,
    InvoiceStatus,
)
from invoicedesk.navigation import ViewCache, redirect
from invoicedesk.services.ledger import RevenueLedger, month_label
from invoicedesk.validation import Err, ValidationResult, validate_form

logger = logging.getLogger(__name__)

CREATE_FAILED = "Missing Fields. Failed to Create Invoice."
UPDATE_FAILED = "Missing Fields. Failed to Update Invoice."
UPDATE_DB_FAILED = "Database Error: Failed to Update Invoice."


def validate_invoice(raw: Mapping[str, Any], policy: InvoiceFieldPolicy) -> ValidationResult:
    return validate_form(
        InvoiceForm,
        raw,
        fields=INVOICE_FIELDS,
        required=sorted(policy.required_fields()),
        messages=policy.messages(),
        context={"amount_positive": policy.amount_positive},
    )


def wall_clock(timezone: str) -> Callable[[], date]:
    zone = ZoneInfo(timezone)
    return lambda: datetime.now(zone).date()


class InvoiceService:
    def __init__(
        self,
        engine: Engine,
        views: ViewCache,
        settings: Settings,
        today: Optional[Callable[[], date]] = None,
    ):
        self.engine = engine
        self.views = views
        self.settings = settings
        self.ledger = RevenueLedger(engine)
        self.policy = InvoiceFieldPolicy(
            required=frozenset(settings.invoice_required_fields),
            amount_positive=settings.invoice_amount_positive,
        )
        self.today = today or wall_clock(settings.timezone)

    def attribution_month(self, mode: AttributionMode, invoice_date: Optional[date]) -> str:
        if mode is AttributionMode.INVOICE_DATE and invoice_date is not None:
            return month_label(invoice_date)
        return month_label(self.today())

    def create_invoice(self, prev_state: Optional[InvoiceState], form_data: Mapping[str, Any]) -> InvoiceState:
        result = validate_invoice(form_data, self.policy)
        if isinstance(result, Err):
            logger.debug("Invoice create rejected: %s", result.errors)
            return InvoiceState(errors=result.errors, message=CREATE_FAILED)

        form: InvoiceForm = result.value
        invoice_date = form.invoice_date or self.today()
        month = self.attribution_month(self.settings.create_attribution, invoice_date)
        amount_cents = form.amount_cents
        invoice_id = str(uuid.uuid4())

        try:
            new_revenue = self.ledger.read_bucket(month) + amount_cents

            with self.engine.begin() as conn:
                conn.execute(
                    insert(invoices).values(
                        id=invoice_id,
                        customer_id=form.customer_id,
                        project_name=form.project_name,
                        amount=amount_cents,
                        remaining=form.remaining_cents,
                        progress=form.progress,
                        status=form.status.value,
                        date=invoice_date,
                    )
                )

            if form.status is InvoiceStatus.PAID:
                self.ledger.write_bucket(month, new_revenue)

            logger.info("Created invoice %s (%s, %d cents)", invoice_id, form.status.value, amount_cents)
        except SQLAlchemyError as exc:
            logger.error("Database Error: Failed to create invoice, %s", exc)

        self.views.revalidate(self.settings.invoices_path)
        redirect(self.settings.invoices_path)

    def update_invoice(
        self,
        invoice_id: str,
        prev_state: Optional[InvoiceState],
        form_data: Mapping[str, Any],
    ) -> InvoiceState:
        result = validate_invoice(form_data, self.policy)
        if isinstance(result, Err):
            logger.debug("Invoice %s update rejected: %s", invoice_id, result.errors)
            return InvoiceState(errors=result.errors, message=UPDATE_FAILED)

        form: InvoiceForm = result.value
        amount_cents = form.amount_cents

        values = {
            "customer_id": form.customer_id,
            "amount": amount_cents,
            "status": form.status.value,
        }
        # omitted optional fields keep their stored value
        if form.project_name is not None:
            values["project_name"] = form.project_name
        if form.remaining is not None:
            values["remaining"] = form.remaining_cents
        if form.progress is not None:
            values["progress"] = form.progress
        if form.invoice_date is not None:
            values["date"] = form.invoice_date

        try:
            month = self.attribution_month(
                self.settings.update_attribution,
                form.invoice_date or self._stored_date(invoice_id),
            )
            # the submitted amount is added again, not the change against the old amount
            new_revenue = self.ledger.read_bucket(month) + amount_cents

            with self.engine.begin() as conn:
                conn.execute(update(invoices).where(invoices.c.id == invoice_id).values(**values))

            if form.status is InvoiceStatus.PAID:
                self.ledger.write_bucket(month, new_revenue)
        except SQLAlchemyError:
            logger.exception("Database Error: Failed to update invoice %s", invoice_id)
            return InvoiceState(message=UPDATE_DB_FAILED)

        logger.info("Updated invoice %s (%s, %d cents)", invoice_id, form.status.value, amount_cents)
        self.views.revalidate(self.settings.invoices_path)
        redirect(self.settings.invoices_path)

    def _stored_date(self, invoice_id: str) -> Optional[date]:
        if self.settings.update_attribution is not AttributionMode.INVOICE_DATE:
            return None
        with self.engine.connect() as conn:
            return conn.execute(
                select(invoices.c.date).where(invoices.c.id == invoice_id)
            ).scalar_one_or_none()

    def delete_invoice(self, invoice_id: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(invoices).where(invoices.c.id == invoice_id))
        except SQLAlchemyError as exc:
            logger.error("Database Error: Failed to Delete Invoice. %s", exc)

        self.views.revalidate(self.settings.invoices_path)

    # Read side

    def _select_invoices(self):
        return (
            select(
                invoices.c.id,
                invoices.c.customer_id,
                customers.c.name.label("customer_name"),
                customers.c.email.label("customer_email"),
                invoices.c.project_name,
                invoices.c.amount,
                invoices.c.remaining,
                invoices.c.progress,
                invoices.c.status,
                invoices.c.date,
            )
            .select_from(invoices.join(customers))
        )

    def list_invoices(self) -> List[InvoiceOut]:
        with self.engine.connect() as conn:
            stmt = self._select_invoices().order_by(invoices.c.date.desc(), invoices.c.id)
            rows = conn.execute(stmt).mappings().all()

        return [InvoiceOut(**row) for row in rows]

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceOut]:
        with self.engine.connect() as conn:
            row = conn.execute(
                self._select_invoices().where(invoices.c.id == invoice_id)
            ).mappings().first()

        if row is None:
            return None
        return InvoiceOut(**row)

# invoicedesk/services/customers.py

import logging
import uuid
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from invoicedesk.config import Settings
from invoicedesk.db.schema import customers
from invoicedesk.models.customers import (
    CUSTOMER_FIELDS,
    CUSTOMER_MESSAGES,
    CustomerForm,
    CustomerOut,
    CustomerState,
)
from invoicedesk.navigation import ViewCache, redirect
from invoicedesk.validation import Err, ValidationResult, validate_form

logger = logging.getLogger(__name__)


def validate_customer(raw: Mapping[str, Any]) -> ValidationResult:
    return validate_form(
        CustomerForm,
        raw,
        fields=CUSTOMER_FIELDS,
        required=CUSTOMER_FIELDS,
        messages=CUSTOMER_MESSAGES,
    )


class CustomerService:
    def __init__(self, engine: Engine, views: ViewCache, settings: Settings):
        self.engine = engine
        self.views = views
        self.settings = settings

    def create_customer(self, prev_state: Optional[CustomerState], form_data: Mapping[str, Any]) -> CustomerState:
        result = validate_customer(form_data)
        if isinstance(result, Err):
            return CustomerState(
                errors=result.errors,
                message="Missing Fields. Failed to Create Customer.",
            )

        form: CustomerForm = result.value
        customer_id = str(uuid.uuid4())

        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(customers).values(
                        id=customer_id,
                        name=form.customer_name,
                        email=form.email,
                        image_url=self.settings.default_customer_image,
                    )
                )
        except SQLAlchemyError:
            logger.exception("Database Error: Failed to create customer")
            return CustomerState(message="Database Error: Failed to Create Customer.")

        logger.info("Created customer %s", customer_id)
        self.views.revalidate(self.settings.customers_path)
        redirect(self.settings.customers_path)

    def update_customer(
        self,
        customer_id: str,
        prev_state: Optional[CustomerState],
        form_data: Mapping[str, Any],
    ) -> CustomerState:
        result = validate_customer(form_data)
        if isinstance(result, Err):
            return CustomerState(
                errors=result.errors,
                message="Missing Fields. Failed to Update Customer.",
            )

        form: CustomerForm = result.value

        try:
            with self.engine.begin() as conn:
                conn.execute(
                    update(customers)
                    .where(customers.c.id == customer_id)
                    .values(name=form.customer_name, email=form.email)
                )
        except SQLAlchemyError:
            logger.exception("Database Error: Failed to update customer %s", customer_id)
            return CustomerState(message="Database Error: Failed to Update Customer.")

        self.views.revalidate(self.settings.customers_path)
        redirect(self.settings.customers_path)

    def delete_customer(self, customer_id: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(customers).where(customers.c.id == customer_id))
        except SQLAlchemyError as exc:
            logger.error("Database Error: Failed to Delete Customer. %s", exc)

        # the invoice listing, not the customer listing, is what gets refreshed
        self.views.revalidate(self.settings.invoices_path)

    def list_customers(self) -> List[CustomerOut]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(customers).order_by(customers.c.name)).mappings().all()

        return [CustomerOut(**row) for row in rows]

    def get_customer(self, customer_id: str) -> Optional[CustomerOut]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(customers).where(customers.c.id == customer_id)
            ).mappings().first()

        if row is None:
            return None
        return CustomerOut(**row)

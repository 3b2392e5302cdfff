# invoicedesk/config.py

"""Application settings.

Values come from environment variables prefixed with ``INVOICEDESK_`` (or a
``.env`` file). :func:`get_settings` caches the merged result; tests call
``get_settings.cache_clear()`` after changing the environment.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import FrozenSet, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AttributionMode(str, Enum):
    """Where a mutation's amount is booked in the revenue ledger.

    ``INVOICE_DATE`` uses the month of the invoice's own ``date`` field,
    ``CLOCK`` uses the current wall-clock month at mutation time.
    """

    INVOICE_DATE = "invoice_date"
    CLOCK = "clock"


# Invoice fields whose presence is decided by configuration. customerId,
# amount and status are always required.
OPTIONAL_INVOICE_FIELDS = frozenset({"project", "remaining", "progress", "date"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INVOICEDESK_", env_file=".env", extra="ignore"
    )

    database_url: str = "sqlite:///db.sqlite"
    log_level: str = "INFO"
    timezone: str = "UTC"

    dashboard_path: str = "/dashboard"
    invoices_path: str = "/dashboard/invoices"
    customers_path: str = "/dashboard/customers"
    default_customer_image: str = "/customers/user.png"

    invoice_required_fields: FrozenSet[str] = frozenset({"project", "date"})
    invoice_amount_positive: bool = False

    create_attribution: AttributionMode = AttributionMode.INVOICE_DATE
    update_attribution: AttributionMode = AttributionMode.CLOCK

    admin_email: Optional[str] = None
    admin_password: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()

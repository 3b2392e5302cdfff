# invoicedesk/services/ledger.py

"""
Revenue ledger: one running total (in cents) per calendar month label.

Reads and writes are separate statements. Nothing here locks a bucket
between :meth:`RevenueLedger.read_bucket` and
:meth:`RevenueLedger.write_bucket`, so two callers adding to the same month
concurrently can lose one of the increments (last write wins).
"""

import logging
from datetime import date
from typing import List

from sqlalchemy import select, update
from sqlalchemy.engine import Engine

from invoicedesk.db.schema import MONTH_LABELS, invoices, revenue
from invoicedesk.models.invoices import InvoiceStatus
from invoicedesk.models.revenue import RevenueBucketOut

logger = logging.getLogger(__name__)


class RevenueBucketNotFound(LookupError):
    def __init__(self, month: str):
        super().__init__(f"No revenue bucket for month {month!r}")
        self.month = month


def month_label(day: date) -> str:
    return MONTH_LABELS[day.month - 1]


class RevenueLedger:
    def __init__(self, engine: Engine):
        self.engine = engine

    def read_bucket(self, month: str) -> int:
        with self.engine.begin() as conn:
            current = conn.execute(
                select(revenue.c.revenue).where(revenue.c.month == month)
            ).scalar_one_or_none()

        if current is None:
            raise RevenueBucketNotFound(month)
        return int(current)

    def write_bucket(self, month: str, cents: int) -> None:
        with self.engine.begin() as conn:
            result = conn.execute(
                update(revenue).where(revenue.c.month == month).values(revenue=cents)
            )

        if result.rowcount == 0:
            raise RevenueBucketNotFound(month)
        logger.debug("Revenue bucket %s set to %d", month, cents)

    def list_buckets(self) -> List[RevenueBucketOut]:
        """All buckets in calendar order."""
        with self.engine.connect() as conn:
            rows = conn.execute(select(revenue.c.month, revenue.c.revenue)).mappings().all()

        by_month = {row["month"]: int(row["revenue"]) for row in rows}
        return [
            RevenueBucketOut(month=label, revenue=by_month[label])
            for label in MONTH_LABELS
            if label in by_month
        ]

    def paid_total_for(self, month: str) -> int:
        """
        Sum of paid invoice amounts dated in ``month`` (any year).

        This is what the bucket would hold if every paid invoice had been
        booked exactly once against its own date.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(invoices.c.amount, invoices.c.date)
                .where(invoices.c.status == InvoiceStatus.PAID.value)
            ).all()

        return sum(row.amount for row in rows if month_label(row.date) == month)

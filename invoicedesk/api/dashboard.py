# invoicedesk/api/dashboard.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select

from invoicedesk.api.deps import get_ledger
from invoicedesk.db.schema import customers, invoices
from invoicedesk.models.invoices import InvoiceStatus
from invoicedesk.models.revenue import DashboardOut, RevenueBucketOut
from invoicedesk.services.ledger import RevenueLedger

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardOut)
def dashboard(ledger: RevenueLedger = Depends(get_ledger)) -> DashboardOut:
    """
    Monthly revenue buckets plus the summary cards: paid and pending totals
    (cents), invoice count and customer count.
    """
    with ledger.engine.connect() as conn:
        totals_stmt = select(
            func.coalesce(
                func.sum(case((invoices.c.status == InvoiceStatus.PAID.value, invoices.c.amount), else_=0)),
                0,
            ).label("total_paid"),
            func.coalesce(
                func.sum(case((invoices.c.status == InvoiceStatus.PENDING.value, invoices.c.amount), else_=0)),
                0,
            ).label("total_pending"),
            func.count().label("invoice_count"),
        ).select_from(invoices)
        totals = conn.execute(totals_stmt).first()

        customer_count = conn.execute(
            select(func.count()).select_from(customers)
        ).scalar_one()

    return DashboardOut(
        revenue=ledger.list_buckets(),
        total_paid=totals.total_paid or 0,
        total_pending=totals.total_pending or 0,
        invoice_count=totals.invoice_count or 0,
        customer_count=customer_count,
    )


@router.get("/revenue", response_model=List[RevenueBucketOut])
def revenue_buckets(ledger: RevenueLedger = Depends(get_ledger)) -> List[RevenueBucketOut]:
    return ledger.list_buckets()

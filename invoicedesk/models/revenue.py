# invoicedesk/models/revenue.py

from typing import List

from pydantic import BaseModel


class RevenueBucketOut(BaseModel):
    month: str
    revenue: int


class DashboardOut(BaseModel):
    revenue: List[RevenueBucketOut]
    total_paid: int
    total_pending: int
    invoice_count: int
    customer_count: int

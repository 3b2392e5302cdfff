# invoicedesk/api/deps.py

from fastapi import Depends

from invoicedesk.config import Settings, get_settings
from invoicedesk.db.engine import get_engine
from invoicedesk.navigation import ViewCache
from invoicedesk.services.credentials import CredentialsSignIn
from invoicedesk.services.customers import CustomerService
from invoicedesk.services.invoices import InvoiceService
from invoicedesk.services.ledger import RevenueLedger
from invoicedesk.services.session import SessionGate

# Shared by every request so revalidation is visible to the next listing read.
view_cache = ViewCache()


def get_view_cache() -> ViewCache:
    return view_cache


def get_invoice_service(
    settings: Settings = Depends(get_settings),
    views: ViewCache = Depends(get_view_cache),
) -> InvoiceService:
    return InvoiceService(get_engine(settings.database_url), views, settings)


def get_customer_service(
    settings: Settings = Depends(get_settings),
    views: ViewCache = Depends(get_view_cache),
) -> CustomerService:
    return CustomerService(get_engine(settings.database_url), views, settings)


def get_ledger(settings: Settings = Depends(get_settings)) -> RevenueLedger:
    return RevenueLedger(get_engine(settings.database_url))


def get_session_gate(settings: Settings = Depends(get_settings)) -> SessionGate:
    credentials = CredentialsSignIn(get_engine(settings.database_url))
    return SessionGate(credentials.sign_in, settings.dashboard_path)

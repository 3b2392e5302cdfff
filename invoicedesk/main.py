from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from invoicedesk.api.auth import router as auth_router
from invoicedesk.api.customers import router as customers_router
from invoicedesk.api.dashboard import router as dashboard_router
from invoicedesk.api.invoices import router as invoices_router
from invoicedesk.config import get_settings
from invoicedesk.logging_config import configure_logging
from invoicedesk.navigation import Redirect

configure_logging(get_settings().log_level)

app = FastAPI(
    title="Invoicedesk",
    version="0.1.0",
)


@app.exception_handler(Redirect)
async def handle_redirect(request: Request, exc: Redirect) -> RedirectResponse:
    return RedirectResponse(exc.path, status_code=303)


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(customers_router)
app.include_router(invoices_router)
app.include_router(dashboard_router)

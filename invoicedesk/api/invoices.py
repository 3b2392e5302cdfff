# invoicedesk/api/invoices.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from invoicedesk.api.deps import get_invoice_service, get_view_cache
from invoicedesk.models.invoices import InvoiceOut, InvoiceState
from invoicedesk.navigation import ViewCache
from invoicedesk.services.invoices import InvoiceService

router = APIRouter(prefix="/dashboard/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceOut])
def list_invoices(
    service: InvoiceService = Depends(get_invoice_service),
    views: ViewCache = Depends(get_view_cache),
) -> List[InvoiceOut]:
    """
    Return all invoices, newest first. Served from the view cache until a
    mutation revalidates it.
    """
    return views.get_or_render(service.settings.invoices_path, service.list_invoices)


@router.post("/", response_model=InvoiceState, status_code=422)
async def create_invoice(
    request: Request,
    service: InvoiceService = Depends(get_invoice_service),
):
    """
    Create an invoice from form fields. Redirects to the listing on success;
    otherwise returns the field errors.
    """
    form = await request.form()
    state = await run_in_threadpool(service.create_invoice, None, form)
    return JSONResponse(state.model_dump(), status_code=422)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceOut:
    invoice = service.get_invoice(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post("/{invoice_id}", response_model=InvoiceState, status_code=422)
async def update_invoice(
    invoice_id: str,
    request: Request,
    service: InvoiceService = Depends(get_invoice_service),
):
    form = await request.form()
    state = await run_in_threadpool(service.update_invoice, invoice_id, None, form)
    return JSONResponse(state.model_dump(), status_code=422)


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> Response:
    service.delete_invoice(invoice_id)
    return Response(status_code=204)

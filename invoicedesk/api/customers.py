# invoicedesk/api/customers.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from invoicedesk.api.deps import get_customer_service, get_view_cache
from invoicedesk.models.customers import CustomerOut, CustomerState
from invoicedesk.navigation import ViewCache
from invoicedesk.services.customers import CustomerService

router = APIRouter(prefix="/dashboard/customers", tags=["customers"])


@router.get("/", response_model=List[CustomerOut])
def list_customers(
    service: CustomerService = Depends(get_customer_service),
    views: ViewCache = Depends(get_view_cache),
) -> List[CustomerOut]:
    """
    Return all customers ordered by name.
    """
    return views.get_or_render(service.settings.customers_path, service.list_customers)


@router.post("/", response_model=CustomerState, status_code=422)
async def create_customer(
    request: Request,
    service: CustomerService = Depends(get_customer_service),
):
    form = await request.form()
    state = await run_in_threadpool(service.create_customer, None, form)
    return JSONResponse(state.model_dump(), status_code=422)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    """
    Return a single customer by ID.
    """
    customer = service.get_customer(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("/{customer_id}", response_model=CustomerState, status_code=422)
async def update_customer(
    customer_id: str,
    request: Request,
    service: CustomerService = Depends(get_customer_service),
):
    form = await request.form()
    state = await run_in_threadpool(service.update_customer, customer_id, None, form)
    return JSONResponse(state.model_dump(), status_code=422)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    service.delete_customer(customer_id)
    return Response(status_code=204)

# invoicedesk/api/auth.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from invoicedesk.api.deps import get_session_gate
from invoicedesk.services.session import SessionGate

router = APIRouter(tags=["auth"])


@router.post("/login")
async def login(request: Request, gate: SessionGate = Depends(get_session_gate)):
    """
    Sign in with ``email`` and ``password`` form fields. Redirects to the
    dashboard on success, responds 401 with a message otherwise.
    """
    form = await request.form()
    failure = await run_in_threadpool(gate.authenticate, None, form)
    return JSONResponse({"message": failure.value}, status_code=401)

"""Registration and login routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...constants import BEARER_PREFIX, Header
from ...schemas.customer_schemas import CustomerRegister, LoginRequest
from ...services.customer_service import CustomerService
from ...services.session_service import SessionService
from ..deps import get_customer_service, get_session_service

router = APIRouter(prefix="/api/user", tags=["user"])


@router.post("/register")
def register(
    body: CustomerRegister,
    customers: CustomerService = Depends(get_customer_service),
):
    principal = customers.register(body)
    return {"id": principal.id, "login": principal.login}


@router.post("/login")
def login(
    body: LoginRequest,
    sessions: SessionService = Depends(get_session_service),
):
    principal, token = sessions.login(body.login, body.password)
    return JSONResponse(
        {"login": principal.login},
        headers={Header.AUTHORIZATION.value: f"{BEARER_PREFIX} {token}"},
    )

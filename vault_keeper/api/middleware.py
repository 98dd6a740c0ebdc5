"""
HTTP middleware: correlation ids and the authorization gate.
"""

import uuid
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ..constants import BEARER_PREFIX, PUBLIC_PATHS, Header
from ..context.principal_context import PrincipalContext
from ..exceptions import (
    BaseError,
    UnauthenticatedError,
    clear_correlation_id,
    set_correlation_id,
)
from ..schemas.customer_schemas import Principal
from .deps import build_session_service


def error_response(error: BaseError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def parse_bearer(header_value: Optional[str]) -> Optional[str]:
    """Token from 'Bearer <token>'; None unless there are exactly two parts."""
    if not header_value:
        return None
    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_PREFIX or not parts[1]:
        return None
    return parts[1]


def _verify_token(state, token: str) -> Principal:
    session = state.db_manager.new_session()
    try:
        return build_session_service(state, session).verify(token)
    finally:
        session.close()


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Attach a X-Correlation-Id to every request/response and to raised errors."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(Header.CORRELATION_ID.value) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[Header.CORRELATION_ID.value] = correlation_id
        return response


class AuthorizationGate(BaseHTTPMiddleware):
    """Require a valid bearer session token on every non-public route.

    The verified principal is placed on request.state and bound to the
    PrincipalContext for the rest of the request. Identity headers sent by
    the client play no part in this.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        token = parse_bearer(request.headers.get(Header.AUTHORIZATION.value))
        if token is None:
            return error_response(UnauthenticatedError("Missing or malformed bearer token"))

        try:
            principal = await run_in_threadpool(_verify_token, request.app.state, token)
        except BaseError as e:
            return error_response(e)

        request.state.principal = principal
        context_token = PrincipalContext.set_current_principal(principal)
        try:
            return await call_next(request)
        finally:
            PrincipalContext.reset(context_token)

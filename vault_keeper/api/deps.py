"""
Shared FastAPI dependencies.

Long-lived collaborators (config, database manager, field cipher, object
store) are attached to ``app.state`` by create_app(); services are built per
request around a request-scoped session.
"""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..exceptions import UnauthenticatedError
from ..schemas.customer_schemas import Principal
from ..services.card_service import CardService
from ..services.customer_service import CustomerService
from ..services.file_service import FileService
from ..services.password_service import PasswordService
from ..services.session_service import SessionService


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """One session per request, closed when the response is done."""
    session = request.app.state.db_manager.new_session()
    try:
        yield session
    finally:
        session.close()


def get_principal(request: Request) -> Principal:
    """Principal bound by the AuthorizationGate; never read from client headers."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise UnauthenticatedError("No authenticated principal")
    return principal


async def read_body(request: Request) -> bytes:
    return await request.body()


def build_session_service(state, session: Session) -> SessionService:
    security = state.config.security
    return SessionService(
        security.sign_key_bytes,
        session=session,
        token_ttl_seconds=security.token_ttl_seconds,
        algorithm=security.jwt_algorithm,
    )


def get_session_service(
    request: Request, session: Session = Depends(get_db_session)
) -> SessionService:
    return build_session_service(request.app.state, session)


def get_customer_service(session: Session = Depends(get_db_session)) -> CustomerService:
    return CustomerService(session=session)


def get_password_service(
    request: Request, session: Session = Depends(get_db_session)
) -> PasswordService:
    return PasswordService(request.app.state.field_cipher, session=session)


def get_card_service(request: Request, session: Session = Depends(get_db_session)) -> CardService:
    return CardService(request.app.state.field_cipher, session=session)


def get_file_service(request: Request, session: Session = Depends(get_db_session)) -> FileService:
    return FileService(
        request.app.state.field_cipher, request.app.state.object_store, session=session
    )

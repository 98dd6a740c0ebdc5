"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import AppConfig, get_config
from ..db.db_config import (
    DatabaseConfig,
    DatabaseManager,
    close_db,
    import_all_models,
    initialize_db,
)
from ..exceptions import BaseError, ErrorCode, ValidationError
from ..services.object_store import LocalObjectStore, ObjectStore
from ..services.session_service import SessionService
from ..utils.field_cipher import FieldCipher
from ..utils.logger import get_logger
from .middleware import AuthorizationGate, CorrelationMiddleware, error_response
from .routers import cards, files, health, passwords, users


async def handle_vault_error(request: Request, exc: BaseError) -> JSONResponse:
    return error_response(exc)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or schema violations are a 400, like every other validation failure."""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    error = ValidationError(
        "Invalid request", error_code=ErrorCode.VALIDATION_FAILED, errors=errors
    )
    return error_response(error)


def _cleanup_expired_tokens(app: FastAPI) -> int:
    session = app.state.db_manager.new_session()
    try:
        security = app.state.config.security
        return SessionService(security.sign_key_bytes, session=session).cleanup_expired_tokens()
    finally:
        session.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await run_in_threadpool(_cleanup_expired_tokens, app)
    yield
    if app.state.owns_db:
        close_db()


def create_app(
    config: Optional[AppConfig] = None,
    db_manager: Optional[DatabaseManager] = None,
    object_store: Optional[ObjectStore] = None,
) -> FastAPI:
    """
    Build the vault application.

    Args:
        config: Application config; defaults to the global config
        db_manager: Database manager; defaults to one built from config.database
        object_store: Payload store; defaults to a LocalObjectStore from config.object_store

    Raises:
        ValidationError: If no signing key is configured
        CryptoError: If the field cipher key is unusable
    """
    config = config or get_config()
    config.security.require_keys()
    field_cipher = FieldCipher(
        config.security.cipher_key_bytes, legacy_fixed_iv=config.security.legacy_fixed_iv
    )

    owns_db = db_manager is None
    if db_manager is None:
        db_manager = initialize_db(DatabaseConfig.from_settings(config.database))
    else:
        import_all_models()
        db_manager.create_tables()

    if object_store is None:
        object_store = LocalObjectStore(
            config.object_store.root_dir, config.object_store.bucket_name
        )
        object_store.ensure_bucket()

    app = FastAPI(
        title="Vault Keeper",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.db_manager = db_manager
    app.state.owns_db = owns_db
    app.state.field_cipher = field_cipher
    app.state.object_store = object_store

    # Last added runs first: correlation id is set before the gate answers
    app.add_middleware(AuthorizationGate)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(BaseError, handle_vault_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(passwords.router)
    app.include_router(cards.router)
    app.include_router(files.router)

    get_logger().info(
        "Vault application created",
        extra={"environment": config.environment, "legacy_fixed_iv": field_cipher.legacy_fixed_iv},
    )
    return app

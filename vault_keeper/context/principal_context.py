"""
Principal context management for the vault.

The authorization gate binds the authenticated principal once per request;
services read it back to scope every query to the caller. The value lives in a
ContextVar, so it follows the request into the worker thread that runs a sync
handler and never leaks across concurrent requests.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from functools import wraps
from typing import Any, Callable, Generator, Optional

from ..exceptions import ErrorCode, ServiceError, UnauthenticatedError
from ..schemas.customer_schemas import Principal
from ..utils.logger import get_logger

_current_principal: ContextVar[Optional[Principal]] = ContextVar(
    "current_principal", default=None
)


class PrincipalContext:
    """
    Manages the principal bound to the current request.

    A principal can be bound once per context; binding a different principal
    on top of an existing one is a wiring error and raises.
    """

    _logger = get_logger()

    @classmethod
    def set_current_principal(cls, principal: Principal) -> Token:
        """
        Bind the principal for the current execution context.

        Args:
            principal: Authenticated principal

        Returns:
            Token that restores the previous value when passed to reset()

        Raises:
            ServiceError: If another principal is already bound
        """
        existing = _current_principal.get()
        if existing is not None and existing != principal:
            raise ServiceError(
                "A different principal is already bound to this context",
                error_code=ErrorCode.PERMISSION_DENIED,
                operation="set_current_principal",
            )

        token = _current_principal.set(principal)
        cls._logger.debug(f"Current principal set to: {principal.id}")
        return token

    @classmethod
    def reset(cls, token: Token) -> None:
        _current_principal.reset(token)

    @classmethod
    def get_current_principal(cls) -> Optional[Principal]:
        return _current_principal.get()

    @classmethod
    def get_current_principal_id(cls) -> Optional[int]:
        principal = _current_principal.get()
        return principal.id if principal else None

    @classmethod
    def require_principal(cls) -> Principal:
        """
        Get the bound principal or fail.

        Raises:
            UnauthenticatedError: If no principal is bound
        """
        principal = _current_principal.get()
        if principal is None:
            raise UnauthenticatedError("No authenticated principal in context")
        return principal


@contextmanager
def principal_context(principal: Principal) -> Generator[Principal, None, None]:
    """
    Bind a principal for the duration of the block and restore afterwards.

    Args:
        principal: Authenticated principal

    Yields:
        The bound principal
    """
    token = PrincipalContext.set_current_principal(principal)
    try:
        yield principal
    finally:
        PrincipalContext.reset(token)


def principal_aware(func: Callable) -> Callable:
    """Refuse to run the wrapped function unless a principal is bound."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        PrincipalContext.require_principal()
        return func(*args, **kwargs)

    return wrapper

"""
Consolidated exception system with error codes, context, and correlation support.

Every error raised by the vault carries an ErrorCode, an HTTP status code and
free-form context. Errors log themselves on construction: client errors (4xx)
at WARNING, server errors (5xx) at ERROR.
"""

import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

# Request-scoped; copied into the worker threads that run sync handlers
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONNECTION_ERROR = "1002"
    CONFIGURATION_ERROR = "1003"
    TIMEOUT_ERROR = "1004"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"
    CONFLICT = "3002"
    EXPIRED = "3004"

    # Access errors (4xxx)
    UNAUTHENTICATED = "4000"
    PERMISSION_DENIED = "4003"

    # Crypto errors (6xxx)
    CRYPTO_ERROR = "6000"
    KEY_TOO_SHORT = "6001"
    INVALID_KEY_SIZE = "6002"
    EMPTY_INPUT = "6003"
    DECODE_ERROR = "6004"
    PADDING_ERROR = "6005"

    # External service errors (5xxx)
    OBJECT_STORE_ERROR = "5001"
    EXTERNAL_API_ERROR = "5002"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP status code for API responses
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Imported lazily: the logger module reads the principal context,
        # which imports this module.
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(
                f"Error {self.error_code.value}: {self.message}", extra=log_data, exc_info=self.cause
            )
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.value}: {self.message}", extra=log_data)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def to_dict(
        self, include_cause: bool = False, include_traceback: bool = False
    ) -> Dict[str, Any]:
        """
        Convert to dict for API responses.

        Server errors are rendered without context so internals never reach
        the client; the error id is enough to find the server-side log line.

        Args:
            include_cause: Include cause information (useful for debugging)
            include_traceback: Include full traceback (only in debug mode)

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        if not self.is_client_error:
            result: Dict[str, Any] = {
                "error": {
                    "id": self.error_id,
                    "code": self.error_code.value,
                    "message": "Internal server error",
                    "timestamp": self.timestamp,
                }
            }
        else:
            result = {
                "error": {
                    "id": self.error_id,
                    "code": self.error_code.value,
                    "message": self.message,
                    "timestamp": self.timestamp,
                    "context": {
                        k: v
                        for k, v in self.context.items()
                        if k not in ["cause", "error_id", "correlation_id"]
                    },
                }
            }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }
            if include_traceback:
                result["error"]["cause"]["traceback"] = self.context["cause"]["traceback"]

        return result

    def add_context(self, **kwargs: Any) -> "BaseError":
        """
        Add additional context to the error (fluent interface).

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    @property
    def error_chain(self) -> List[Exception]:
        """Get the full chain of errors."""
        chain: List[Exception] = [self]
        current = self.cause
        while current:
            chain.append(current)
            current = getattr(current, "cause", None)
        return chain


# Layer-specific base exceptions
class InfrastructureError(BaseError):
    """Storage or object-store failure; always surfaced as a generic 500."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        cause: Optional[Exception] = None,
        **context,
    ):
        super().__init__(message, error_code, 500, cause, **context)


class RepositoryError(InfrastructureError):
    """Repository layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize repository error with database context."""
        super().__init__(message, error_code, cause, **context)


class ObjectStoreError(InfrastructureError):
    """Object store upload/download failures."""

    def __init__(self, message: str, cause: Optional[Exception] = None, **context):
        super().__init__(message, ErrorCode.OBJECT_STORE_ERROR, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize service error with operation context."""
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, 500, cause, **context)


class ValidationError(BaseError):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize validation error with field context."""
        if field:
            context["field"] = field
        super().__init__(message, error_code, 400, cause, **context)


class UnauthenticatedError(BaseError):
    """Missing, malformed, expired, mis-signed or superseded credentials."""

    def __init__(self, message: str = "Unauthenticated", **kwargs):
        super().__init__(
            message=message, error_code=ErrorCode.UNAUTHENTICATED, status_code=401, **kwargs
        )


class RecordNotFoundError(BaseError):
    """Raised when a record does not exist for the calling principal."""

    def __init__(self, message: str = "Record not found", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.NOT_FOUND, status_code=404, **kwargs)


class ConflictError(BaseError):
    """Duplicate title for the same owner, or duplicate login on registration."""

    def __init__(self, message: str = "Resource already exists", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.DUPLICATE, status_code=409, **kwargs)


# ==================== CRYPTO EXCEPTIONS ====================


class CryptoError(BaseError):
    """Base exception for field cipher failures."""

    def __init__(
        self,
        message: str = "Crypto failure",
        error_code: ErrorCode = ErrorCode.CRYPTO_ERROR,
        **kwargs,
    ):
        super().__init__(message=message, error_code=error_code, status_code=500, **kwargs)


class KeyTooShortError(CryptoError):
    """Cipher key shorter than 16 bytes."""

    def __init__(self, message: str = "Key is too short", **kwargs):
        super().__init__(message, ErrorCode.KEY_TOO_SHORT, **kwargs)


class InvalidKeySizeError(CryptoError):
    """Prepared key length is not a valid AES key size."""

    def __init__(self, message: str = "Invalid key size", **kwargs):
        super().__init__(message, ErrorCode.INVALID_KEY_SIZE, **kwargs)


class EmptyInputError(CryptoError):
    """Empty plaintext on encrypt, empty or block-misaligned payload on decrypt."""

    def __init__(self, message: str = "Empty input", **kwargs):
        super().__init__(message, ErrorCode.EMPTY_INPUT, **kwargs)


class DecodeError(CryptoError):
    """Ciphertext is not valid base64 or does not decode to text."""

    def __init__(self, message: str = "Cannot decode ciphertext", **kwargs):
        super().__init__(message, ErrorCode.DECODE_ERROR, **kwargs)


class PaddingError(CryptoError):
    """Malformed PKCS#7 padding on decrypt."""

    def __init__(self, message: str = "Malformed padding", **kwargs):
        super().__init__(message, ErrorCode.PADDING_ERROR, **kwargs)


# Factory functions for common error patterns
def not_found(resource_type: str, cause: Optional[Exception] = None, **identifiers) -> BaseError:
    """
    Factory for not found errors.

    Args:
        resource_type: Type of resource (e.g., 'Card', 'Password')
        cause: Original exception if any
        **identifiers: Resource identifiers (e.g., title='visa')

    Returns:
        Configured RecordNotFoundError instance with 404 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"{resource_type} not found"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return RecordNotFoundError(
        message,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def duplicate(resource_type: str, cause: Optional[Exception] = None, **identifiers) -> BaseError:
    """
    Factory for duplicate resource errors.

    Args:
        resource_type: Type of resource (e.g., 'Card', 'Customer')
        cause: Original exception if any
        **identifiers: Resource identifiers

    Returns:
        Configured ConflictError instance with 409 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"Duplicate {resource_type}"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return ConflictError(
        message,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def validation_failed(
    field: str, value: Any, reason: str, cause: Optional[Exception] = None
) -> ValidationError:
    """
    Factory for validation errors.

    Args:
        field: Field that failed validation
        value: The invalid value
        reason: Why validation failed
        cause: Original exception if any

    Returns:
        Configured ValidationError instance
    """
    return ValidationError(
        f"Validation failed for {field}: {reason}",
        field=field,
        error_code=ErrorCode.VALIDATION_FAILED,
        cause=cause,
        value=str(value),
        reason=reason,
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current request context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the current request context's correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the current request context's correlation ID."""
    _correlation_id.set(None)

"""Application error taxonomy.

Every failure the inventory service reports to a caller is an ``AppError``:
a stable machine-readable ``code``, a human ``message``, optional structured
``details`` and a suggested HTTP status (``status_code``).

The hierarchy groups kinds so callers can catch a whole family::

    AppError
    ├── InputError              VALIDATION_ERROR
    │   ├── InvalidInput        INVALID_INPUT
    │   ├── MissingRequiredField MISSING_REQUIRED_DATA
    │   └── InvalidFormat       INVALID_FORMAT
    ├── NotFound                NOT_FOUND
    │   ├── ProductNotFound     PRODUCT_NOT_FOUND
    │   └── UserNotFound        USER_NOT_FOUND
    ├── BusinessRuleViolation   BUSINESS_LOGIC_ERROR
    │   ├── InsufficientStock   INSUFFICIENT_STOCK
    │   └── DuplicateEntry      DUPLICATE_ENTRY
    ├── StorageError            DATABASE_ERROR
    │   ├── StorageConnectionError CONNECTION_ERROR
    │   └── MigrationError      MIGRATION_ERROR
    ├── InternalError           INTERNAL_SERVER_ERROR
    │   └── UnknownError        UNKNOWN_ERROR
    └── AccessError
        ├── Unauthorized        UNAUTHORIZED
        ├── Forbidden           FORBIDDEN
        └── TokenExpired        TOKEN_EXPIRED

This module is framework-agnostic: it never imports Django or DRF.  The HTTP
boundary decides the final status (see ``status_hint`` overrides).
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Iterable, Mapping, Optional


class ErrorCode(str, Enum):
    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_REQUIRED_DATA = "MISSING_REQUIRED_DATA"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Not found
    NOT_FOUND = "NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Business rules
    BUSINESS_LOGIC_ERROR = "BUSINESS_LOGIC_ERROR"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Storage
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    MIGRATION_ERROR = "MIGRATION_ERROR"

    # Internal
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    # Access
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Status hints
# ---------------------------------------------------------------------------

STATUS_HINTS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_INPUT: HTTPStatus.BAD_REQUEST,
    ErrorCode.MISSING_REQUIRED_DATA: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_FORMAT: HTTPStatus.BAD_REQUEST,
    ErrorCode.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.PRODUCT_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.BUSINESS_LOGIC_ERROR: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorCode.INSUFFICIENT_STOCK: HTTPStatus.CONFLICT,
    ErrorCode.DUPLICATE_ENTRY: HTTPStatus.CONFLICT,
    ErrorCode.DATABASE_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.CONNECTION_ERROR: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.MIGRATION_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_SERVER_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.UNKNOWN_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorCode.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorCode.TOKEN_EXPIRED: HTTPStatus.UNAUTHORIZED,
}


def status_hint(
    code: ErrorCode | str,
    overrides: Optional[Mapping[ErrorCode | str, int]] = None,
) -> int:
    """Return the suggested HTTP status for ``code``.

    ``overrides`` (keyed by ``ErrorCode`` or its string value) takes
    precedence over the built-in table.  An unknown code in either place
    raises ``ValueError``.
    """
    code = ErrorCode(code)
    if overrides:
        for key, status in overrides.items():
            if ErrorCode(key) is code:
                return int(status)
    return int(STATUS_HINTS[code])


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class AppError(Exception):
    """Root of the taxonomy.  Subclasses pin ``code`` and ``default_message``."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    @property
    def status_code(self) -> int:
        return status_hint(self.code)

    def with_details(self, details: Any) -> AppError:
        self.details = details
        return self

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class InputError(AppError):
    """Generic validation failure, usually carrying per-field errors."""

    code = ErrorCode.VALIDATION_ERROR
    default_message = "Validation failed"

    @classmethod
    def from_field_errors(cls, errors: Iterable[Mapping[str, Any]]) -> InputError:
        """Build an error whose details list each ``{field, message, value?}``."""
        return cls(details={"errors": [dict(error) for error in errors]})


class InvalidInput(InputError):
    code = ErrorCode.INVALID_INPUT
    default_message = "Invalid input"


class MissingRequiredField(InputError):
    code = ErrorCode.MISSING_REQUIRED_DATA
    default_message = "Missing required field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}", details={"field": field})
        self.field = field


class InvalidFormat(InputError):
    code = ErrorCode.INVALID_FORMAT
    default_message = "Invalid format"

    def __init__(self, field: str) -> None:
        super().__init__(f"Invalid format for field: {field}", details={"field": field})
        self.field = field


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFound(AppError):
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class ProductNotFound(NotFound):
    code = ErrorCode.PRODUCT_NOT_FOUND

    def __init__(self, product_id: Any) -> None:
        super().__init__(
            f"Product with ID {product_id} not found",
            details={"id": str(product_id)},
        )
        self.product_id = product_id


class UserNotFound(NotFound):
    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id: Any) -> None:
        super().__init__(
            f"User with ID {user_id} not found",
            details={"id": str(user_id)},
        )
        self.user_id = user_id


# ---------------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------------


class BusinessRuleViolation(AppError):
    code = ErrorCode.BUSINESS_LOGIC_ERROR
    default_message = "Business rule violated"


class InsufficientStock(BusinessRuleViolation):
    """A decrement asked for more units than are on hand."""

    code = ErrorCode.INSUFFICIENT_STOCK

    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"Insufficient stock. Available: {available}, Required: {required}",
            details={"available": available, "required": required},
        )
        self.available = available
        self.required = required


class DuplicateEntry(BusinessRuleViolation):
    code = ErrorCode.DUPLICATE_ENTRY

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"Duplicate entry for {field}: {value}",
            details={"field": field, "value": value},
        )


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageError(AppError):
    code = ErrorCode.DATABASE_ERROR
    default_message = "Database operation failed"


class StorageConnectionError(StorageError):
    code = ErrorCode.CONNECTION_ERROR
    default_message = "Database connection is not available"


class MigrationError(StorageError):
    code = ErrorCode.MIGRATION_ERROR
    default_message = "Database migration failed"


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------


class InternalError(AppError):
    code = ErrorCode.INTERNAL_SERVER_ERROR
    default_message = "An internal error occurred"


class UnknownError(InternalError):
    code = ErrorCode.UNKNOWN_ERROR
    default_message = "An unknown error occurred"


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


class AccessError(AppError):
    code = ErrorCode.UNAUTHORIZED
    default_message = "Unauthorized access"


class Unauthorized(AccessError):
    pass


class Forbidden(AccessError):
    code = ErrorCode.FORBIDDEN
    default_message = "Access forbidden"


class TokenExpired(AccessError):
    code = ErrorCode.TOKEN_EXPIRED
    default_message = "Token has expired"


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def from_exception(exc: BaseException) -> AppError:
    """Return ``exc`` as an ``AppError``.

    Taxonomy errors pass through untouched; anything else becomes an
    ``UnknownError`` whose details hold the original message.
    """
    if isinstance(exc, AppError):
        return exc
    return UnknownError(details=str(exc))

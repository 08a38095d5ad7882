"""DRF exception handler rendering the error taxonomy as JSON envelopes.

Installed via ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.  Views raise
``AppError`` subclasses (or let the service raise them) and never build
error responses by hand.

Mapping:
- ``AppError``        -> its code, status from ``status_hint`` honouring
                         ``settings.ERROR_STATUS_OVERRIDES``.
- ``ParseError``      -> INVALID_INPUT (malformed request body).
- ``Http404``/``NotFound`` -> NOT_FOUND.
- other ``APIException`` -> DRF status, upper-cased DRF default code.
- anything else       -> UNKNOWN_ERROR (500), original message only in DEBUG.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.conf import settings
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import set_rollback

from modules.core.responses import app_error_payload, error_payload
from shared.domain.errors import (
    AppError,
    InputError,
    InvalidInput,
    NotFound,
    UnknownError,
    from_exception,
    status_hint,
)

logger = structlog.get_logger(__name__)


def input_error_from_pydantic(exc: PydanticValidationError) -> InputError:
    """Translate a pydantic ``ValidationError`` into VALIDATION_ERROR details."""
    return InputError.from_field_errors(_field_errors(exc.errors()))


def _field_errors(errors: Iterable[Dict[str, Any]]):
    for error in errors:
        item: Dict[str, Any] = {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        value = error.get("input")
        if isinstance(value, (str, int, float, bool)):
            item["value"] = value
        yield item


def _describe_api_exception(exc: exceptions.APIException) -> str:
    detail = exc.detail
    if isinstance(detail, (list, dict)):
        return str(exc.default_detail)
    return str(detail)


def _log(status_code: int, code: str, message: str, view: Optional[str]) -> None:
    log = logger.error if status_code >= 500 else logger.warning
    log("api.error", status_code=status_code, code=code, message=message, view=view)


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else None

    if isinstance(exc, PydanticValidationError):
        exc = input_error_from_pydantic(exc)
    elif isinstance(exc, exceptions.ParseError):
        exc = InvalidInput(f"invalid request body format: {exc.detail}")
    elif isinstance(exc, (Http404, exceptions.NotFound)):
        exc = NotFound()

    if isinstance(exc, AppError):
        status_code = status_hint(exc.code, getattr(settings, "ERROR_STATUS_OVERRIDES", None))
        set_rollback()
        _log(status_code, exc.code.value, exc.message, view_name)
        return Response(app_error_payload(exc), status=status_code)

    if isinstance(exc, exceptions.APIException):
        code = str(exc.default_code).upper()
        message = _describe_api_exception(exc)
        set_rollback()
        _log(exc.status_code, code, message, view_name)
        headers = {}
        if getattr(exc, "wait", None):
            headers["Retry-After"] = str(int(exc.wait))
        return Response(
            error_payload(message, code),
            status=exc.status_code,
            headers=headers,
        )

    logger.exception("api.unhandled_exception", view=view_name)
    if settings.DEBUG:
        error = from_exception(exc)
    else:
        error = UnknownError("An unexpected error occurred")
    set_rollback()
    return Response(app_error_payload(error), status=error.status_code)

"""JSON envelopes shared by every API view.

Success: ``{"success": true, "message": ..., "data": ...}``
Error:   ``{"success": false, "message": ..., "code": ..., "details": ...}``
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.response import Response

from shared.domain.errors import AppError


def success(
    data: Any = None,
    message: str = "Operation completed successfully",
    status_code: int = status.HTTP_200_OK,
) -> Response:
    payload: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status_code)


def created(data: Any) -> Response:
    return success(
        data,
        message="Resource created successfully",
        status_code=status.HTTP_201_CREATED,
    )


def no_content() -> Response:
    return Response(status=status.HTTP_204_NO_CONTENT)


def error_payload(
    message: str,
    code: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "message": message, "code": code}
    if details is not None:
        payload["details"] = details
    return payload


def app_error_payload(error: AppError) -> Dict[str, Any]:
    return error_payload(error.message, error.code.value, error.details)

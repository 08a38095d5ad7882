import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs end up in every log line; anything else is replaced.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _request_id(request: HttpRequest) -> str:
    supplied = request.META.get("HTTP_X_REQUEST_ID", "")
    if _VALID_REQUEST_ID.match(supplied):
        return supplied
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tag every request with a correlation ID.

    Reuses a well-formed ``X-Request-ID`` header or generates a UUID4, binds
    it into structlog's context vars for the lifetime of the request and
    echoes it on the response.  Start and end of each request are logged
    with the elapsed time.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        path = request.get_full_path()
        logger.info("request_started", method=request.method, path=path)
        started = time.monotonic()

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
        response[REQUEST_ID_HEADER] = cid
        return response

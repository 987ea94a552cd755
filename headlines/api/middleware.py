"""API middleware -- request context, request logging, and error handling.

Starlette middleware is a stack (last added, first executed).  In
``headlines/main.py``:

    app.add_middleware(ErrorHandlingMiddleware)   # inner
    app.add_middleware(RequestLoggingMiddleware)  # outermost

so RequestLoggingMiddleware sees the final status code, including the
ones ErrorHandlingMiddleware produced.

Every request gets a ``request_id`` (taken from ``X-Request-ID`` when the
client sends one) bound into structlog's context variables.  Tasks
created while handling the request, such as the article writes launched
by ``/api/fetch``, copy that context, so their log events carry the id of
the request that started them.
"""

from __future__ import annotations

import time
from uuid import uuid4

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from headlines.api.schemas import ErrorResponse
from headlines.utils.errors import HeadlinesError, TransportError
from headlines.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Fetch failures are an upstream problem; everything else is ours.
_STATUS_BY_ERROR: dict[type[HeadlinesError], int] = {
    TransportError: 502,
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag the request with an id and log one ``http_request`` event for it."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Render ``HeadlinesError`` as a JSON ``ErrorResponse``.

    The store or fetcher message goes to the client unchanged as
    ``detail``.  That exposes backend detail (driver messages, URLs) and
    is kept for compatibility with existing clients.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except HeadlinesError as exc:
            status_code = _STATUS_BY_ERROR.get(type(exc), 500)
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=request.url.path,
                status=status_code,
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
                provider=exc.provider_name,
            )
            return JSONResponse(status_code=status_code, content=body.model_dump())

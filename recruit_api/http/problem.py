"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and the handler callables registered by the
application factory. Error bodies are deliberately generic: a title and a
status code, never the underlying cause.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

PROBLEM_MEDIA_TYPE = "application/problem+json"

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    500: "Internal Server Error",
}

logger = logging.getLogger(__name__)


def problem(status: int, title: str | None = None) -> JSONResponse:
    """Build a minimal problem+json response for ``status``."""
    body = {"title": title or _TITLES.get(status, "Error"), "status": status}
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status_code = int(exc.status_code or 500)
    title = exc.detail if isinstance(exc.detail, str) and exc.detail else None
    resp = problem(status_code, title)
    if exc.headers:
        resp.headers.update(exc.headers)
    return resp


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    # Malformed bodies are reported as 400 without field-level detail.
    logger.info(
        "request_validation_failed method=%s path=%s errors=%d",
        request.method,
        request.url.path,
        len(exc.errors()),
    )
    return problem(400)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return problem(500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]

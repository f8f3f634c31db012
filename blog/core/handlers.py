"""Exception handlers producing the API's JSON error envelope.

Every error body has the same shape::

    {"error": true, "message": "...", "status_code": 404, "request_id": "..."}

plus ``details`` for validation failures and ``detail`` when a handler raised
an ``HTTPException`` with structured detail (the conflicting registration
field, for instance). Messages of 5xx responses are never passed through.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog.core.context import get_request_id
from blog.core.logging import get_logger


logger = get_logger(__name__)

GENERIC_5XX_MESSAGE = "An unexpected error occurred. Please try again later."


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> ORJSONResponse:
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    body = {
        "error": True,
        "message": message,
        "status_code": status_code,
        "request_id": request_id,
        **extra,
    }
    return ORJSONResponse(status_code=status_code, content=body, headers=headers)


async def on_http_exception(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=str(exc.detail),
        method=request.method,
        path=request.url.path,
    )
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return error_response(request, exc.status_code, "Internal server error")

    headers = getattr(exc, "headers", None)
    if isinstance(exc.detail, dict):
        message = exc.detail.get("message", "Request failed")
        return error_response(
            request, exc.status_code, message, headers=headers, detail=exc.detail
        )
    return error_response(request, exc.status_code, str(exc.detail), headers=headers)


async def on_validation_error(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Malformed input is a 400 listing each offending field."""
    problems = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    logger.warning(
        "validation_error", problems=problems, method=request.method, path=request.url.path
    )
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, "Validation error", details=problems
    )


async def on_unhandled(request: Request, exc: Exception) -> ORJSONResponse:
    logger.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
    )
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_5XX_MESSAGE
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, on_http_exception)
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(Exception, on_unhandled)

"""Request context and access logging middleware."""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from blog.core.context import clear_context, set_request_id, set_trace_id
from blog.core.logging import get_logger


logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def client_ip(request: Request) -> str | None:
    """First hop of ``X-Forwarded-For`` when behind a proxy, else the peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.headers.get("x-real-ip") or (
        request.client.host if request.client else None
    )


def trace_id_from(request: Request) -> str | None:
    """``X-Trace-ID``, or the trace id of a W3C ``traceparent`` header."""
    explicit = request.headers.get("x-trace-id")
    if explicit:
        return explicit
    # version-traceid-parentid-flags
    parts = request.headers.get("traceparent", "").split("-")
    return parts[1] if len(parts) == 4 else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request ids to the log context and log each request once."""

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ())

    def _should_log(self, path: str) -> bool:
        return self.log_requests and not path.startswith(self.exclude_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        trace_id = trace_id_from(request)
        if trace_id:
            set_trace_id(trace_id)

        try:
            response = await call_next(request)
            if self._should_log(request.url.path):
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    client_ip=client_ip(request),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

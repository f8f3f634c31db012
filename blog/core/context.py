"""Per-request log context.

Values are bound with :mod:`structlog.contextvars`, so every event logged
while handling a request carries its ``request_id`` (and ``user_id`` once the
caller is authenticated) without service code passing them around.
"""

from uuid import UUID, uuid4

from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars


def set_request_id(request_id: str | None = None) -> str:
    """Bind the incoming request id, or a fresh one; returns the id bound."""
    rid = request_id or str(uuid4())
    bind_contextvars(request_id=rid)
    return rid


def get_request_id() -> str | None:
    return get_contextvars().get("request_id")


def set_user_id(user_id: str | UUID) -> None:
    bind_contextvars(user_id=str(user_id))


def set_trace_id(trace_id: str) -> None:
    bind_contextvars(trace_id=trace_id)


def clear_context() -> None:
    clear_contextvars()

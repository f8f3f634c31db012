from blog.core.context import clear_context, get_request_id, set_request_id, set_user_id
from blog.core.logging import configure_structlog, get_logger


__all__ = [
    "clear_context",
    "configure_structlog",
    "get_logger",
    "get_request_id",
    "set_request_id",
    "set_user_id",
]

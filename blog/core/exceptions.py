"""Domain errors shared by every blog service.

Services raise these; routers convert them to HTTP responses with
:func:`handle_blog_error`.
"""

from fastapi import HTTPException, status


class BlogError(Exception):
    """Base blog error."""

    def __init__(self, message: str, code: str = "blog_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(BlogError):
    """Referenced entity does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, "not_found")


class ForbiddenError(BlogError):
    """Requester does not own the resource."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, "forbidden")


class InvalidParentError(BlogError):
    """Reply parent is missing or belongs to another post."""

    def __init__(self, message: str = "Invalid parent comment"):
        super().__init__(message, "invalid_parent")


class ValidationFailedError(BlogError):
    """Input rejected by a domain rule."""

    def __init__(self, message: str = "Validation failed", code: str = "validation_failed"):
        super().__init__(message, code)


class SlugConflictError(ValidationFailedError):
    """Derived slug already taken."""

    def __init__(self, message: str = "An entry with this title already exists"):
        super().__init__(message, "slug_exists")


class RateLimitExceededError(BlogError):
    def __init__(self, message: str = "Too many requests, slow down"):
        super().__init__(message, "rate_limit_exceeded")


class UnexpectedError(BlogError):
    """Storage or infrastructure fault."""

    def __init__(self, message: str = "Unexpected storage error"):
        super().__init__(message, "unexpected")


STATUS_MAP = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "invalid_parent": status.HTTP_400_BAD_REQUEST,
    "validation_failed": status.HTTP_400_BAD_REQUEST,
    "slug_exists": status.HTTP_400_BAD_REQUEST,
    "already_subscribed": status.HTTP_400_BAD_REQUEST,
    "rate_limit_exceeded": status.HTTP_429_TOO_MANY_REQUESTS,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "user_exists": status.HTTP_409_CONFLICT,
    "unexpected": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def handle_blog_error(error: BlogError) -> HTTPException:
    """Convert a blog error to an HTTP exception.

    Args:
        error: Domain error raised by a service

    Returns:
        HTTPException with the mapped status code
    """
    status_code = STATUS_MAP.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.message)

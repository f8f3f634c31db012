"""Dependency factory for services published on ``app.state``.

Services are built in the application lifespan once the Cassandra session is
up. When startup ran without a database they are absent and every endpoint
that needs one answers 503 instead of failing on attribute access.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException, Request, status


def from_app_state(attribute: str, label: str) -> Callable[[Request], Awaitable[Any]]:
    """Build a dependency returning ``request.app.state.<attribute>``.

    Example:
        get_post_service = from_app_state("post_service", "Post")
        PostServiceDep = Annotated[PostService, Depends(get_post_service)]
    """

    async def dependency(request: Request) -> Any:
        service = getattr(request.app.state, attribute, None)
        if service is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"{label} service not available",
            )
        return service

    dependency.__name__ = f"get_{attribute}"
    return dependency

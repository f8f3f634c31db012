"""FastAPI dependencies for posts."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import PostService


get_post_service = from_app_state("post_service", "Post")

PostServiceDep = Annotated[PostService, Depends(get_post_service)]

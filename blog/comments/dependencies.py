"""FastAPI dependencies for the comment system."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import CommentService


get_comment_service = from_app_state("comment_service", "Comment")

CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]

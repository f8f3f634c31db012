"""Pydantic schemas for the comment system.

Content length is checked by the service (and reported as a 400
``validation_failed``) so that every entry point enforces the same rule.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from blog.auth.schemas import AuthorSummary
from blog.core.schemas import PaginationInfo
from blog.posts.schemas import PostSummary
from blog.utils.text import sanitize_html

from .models import Comment


CommentSort = Literal["newest", "oldest", "popular"]


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateCommentRequest(BaseModel):
    """Request to create a comment or a reply."""

    content: str
    post_id: UUID
    parent_id: UUID | None = None


class UpdateCommentRequest(BaseModel):
    content: str


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """Response for a single comment, with populated replies when listed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    parent_id: UUID | None = None
    author: AuthorSummary
    content: str
    likes_count: int = 0
    is_liked: bool = False
    replies: list["CommentResponse"] = []
    replies_count: int = 0
    is_edited: bool = False
    edited_at: datetime | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    is_approved: bool = True
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        replies: list[Comment] | None = None,
        viewer_id: UUID | None = None,
    ) -> "CommentResponse":
        """Create response from Comment entity.

        Args:
            comment: Comment entity
            replies: Already filtered and ordered replies to embed
            viewer_id: Account used to compute ``is_liked``
        """
        return cls(
            id=comment.comment_id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            author=AuthorSummary(id=comment.author_id, username=comment.author_name),
            content=sanitize_html(comment.content),
            likes_count=comment.likes_count,
            is_liked=viewer_id is not None and comment.is_liked_by(viewer_id),
            replies=[cls.from_comment(r, viewer_id=viewer_id) for r in replies or ()],
            replies_count=comment.replies_count,
            is_edited=comment.is_edited,
            edited_at=comment.edited_at,
            is_deleted=comment.is_deleted,
            deleted_at=comment.deleted_at,
            is_approved=comment.is_approved,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    pagination: PaginationInfo


class UserCommentResponse(CommentResponse):
    """Comment in an author's history, with the post it belongs to."""

    post: PostSummary | None = None


class UserCommentListResponse(BaseModel):
    comments: list[UserCommentResponse]
    pagination: PaginationInfo


class CommentLikeResponse(BaseModel):
    comment: CommentResponse
    is_liked: bool
    likes_count: int

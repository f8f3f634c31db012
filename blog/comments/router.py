"""Comment system API endpoints.

Provides routes for:
- Threaded listing per post and per author
- Comment create, edit and soft delete
- Like toggling and reporting
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from blog.auth.dependencies import CurrentUser, OptionalUser
from blog.core.exceptions import BlogError, handle_blog_error
from blog.core.schemas import MessageResponse, PaginationInfo
from blog.posts.schemas import PostSummary

from .dependencies import CommentServiceDep
from .schemas import (
    CommentLikeResponse,
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
    UserCommentListResponse,
    UserCommentResponse,
)


router = APIRouter(prefix="/v1/comments", tags=["comments"])


@router.get(
    "/post/{post_id}",
    response_model=CommentListResponse,
    summary="List comments of a post",
)
async def list_post_comments(
    post_id: UUID,
    comment_service: CommentServiceDep,
    user: OptionalUser,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort: str = "newest",
) -> CommentListResponse:
    """Visible top-level comments with their visible replies.

    ``sort`` is ``newest``, ``oldest`` or ``popular``; anything else is
    treated as ``newest``.
    """
    try:
        threads, total = await comment_service.list_by_post(post_id, page, limit, sort)
    except BlogError as e:
        raise handle_blog_error(e) from e

    viewer_id = user.id if user else None
    return CommentListResponse(
        comments=[
            CommentResponse.from_comment(comment, replies, viewer_id)
            for comment, replies in threads
        ],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.get(
    "/user/{user_id}",
    response_model=UserCommentListResponse,
    summary="List comments of an author",
)
async def list_user_comments(
    user_id: UUID,
    comment_service: CommentServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> UserCommentListResponse:
    try:
        items, total = await comment_service.list_by_author(user_id, page, limit)
    except BlogError as e:
        raise handle_blog_error(e) from e

    comments = []
    for comment, post in items:
        response = UserCommentResponse.from_comment(comment)
        response.post = PostSummary.from_post(post) if post else None
        comments.append(response)

    return UserCommentListResponse(
        comments=comments,
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: UUID,
    comment_service: CommentServiceDep,
    user: OptionalUser,
) -> CommentResponse:
    try:
        comment = await comment_service.require_comment(comment_id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CommentResponse.from_comment(comment, viewer_id=user.id if user else None)


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create comment",
)
async def create_comment(
    data: CreateCommentRequest,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Create a comment on a post, or a reply when ``parent_id`` is set.

    Rate limited to 10/min, 100/hour per author.
    """
    try:
        comment = await comment_service.create_comment(
            content=data.content,
            post_id=data.post_id,
            author=user,
            parent_id=data.parent_id,
        )
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CommentResponse.from_comment(comment, viewer_id=user.id)


@router.put("/{comment_id}", response_model=CommentResponse, summary="Edit comment")
async def update_comment(
    comment_id: UUID,
    data: UpdateCommentRequest,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Edit a comment. Only its author may do so."""
    try:
        comment = await comment_service.update_comment(
            comment_id, data.content, user.id
        )
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CommentResponse.from_comment(comment, viewer_id=user.id)


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete comment",
)
async def delete_comment(
    comment_id: UUID,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Soft delete a comment. Only its author may do so."""
    try:
        await comment_service.delete_comment(comment_id, user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/like", response_model=CommentLikeResponse)
async def toggle_comment_like(
    comment_id: UUID,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentLikeResponse:
    try:
        comment, liked = await comment_service.toggle_like(comment_id, user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e

    return CommentLikeResponse(
        comment=CommentResponse.from_comment(comment, viewer_id=user.id),
        is_liked=liked,
        likes_count=comment.likes_count,
    )


@router.post("/{comment_id}/report", response_model=MessageResponse)
async def report_comment(
    comment_id: UUID,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Report a comment. Five reports hide it from listings."""
    try:
        await comment_service.report_comment(comment_id, user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return MessageResponse(message="Comment reported successfully")

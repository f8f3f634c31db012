"""Post API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from blog.auth.dependencies import CurrentUser
from blog.core.exceptions import BlogError, handle_blog_error
from blog.utils.pagination import total_pages

from .dependencies import PostServiceDep
from .schemas import (
    CreatePostRequest,
    PostLikeResponse,
    PostListResponse,
    PostResponse,
    UpdatePostRequest,
)


router = APIRouter(prefix="/v1/posts", tags=["posts"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    service: PostServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    category: str | None = None,
    search: str | None = None,
    published: bool = True,
) -> PostListResponse:
    """List posts newest first, optionally filtered by category or text."""
    try:
        posts, total = await service.list_posts(
            page=page,
            limit=limit,
            category=category,
            search=search,
            published_only=published,
        )
        responses = await service.to_responses(posts)
    except BlogError as e:
        raise handle_blog_error(e) from e

    return PostListResponse(
        posts=responses,
        total=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )


@router.get("/{slug}", response_model=PostResponse)
async def get_post(slug: str, service: PostServiceDep) -> PostResponse:
    """Read a post; counts one view."""
    try:
        post = await service.get_by_slug(slug)
        return await service.to_response(post)
    except BlogError as e:
        raise handle_blog_error(e) from e


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: CreatePostRequest,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> PostResponse:
    try:
        post = await service.create_post(data, current_user)
        return await service.to_response(post)
    except BlogError as e:
        raise handle_blog_error(e) from e


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    data: UpdatePostRequest,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> PostResponse:
    try:
        post = await service.update_post(post_id, data, current_user)
        return await service.to_response(post)
    except BlogError as e:
        raise handle_blog_error(e) from e


@router.delete("/{post_id}")
async def delete_post(
    post_id: UUID,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> dict[str, str]:
    try:
        await service.delete_post(post_id, current_user)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=PostLikeResponse)
async def toggle_post_like(
    post_id: UUID,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> PostLikeResponse:
    try:
        likes, liked = await service.toggle_like(post_id, current_user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return PostLikeResponse(likes=likes, liked=liked)

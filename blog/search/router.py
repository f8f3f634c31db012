"""Search API endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from blog.comments.schemas import CommentResponse, UserCommentResponse
from blog.core.exceptions import BlogError, handle_blog_error
from blog.core.schemas import PaginationInfo
from blog.posts.schemas import PostSummary
from blog.profiles.schemas import ProfileResponse

from .dependencies import SearchServiceDep
from .schemas import (
    PostCommentSearchResponse,
    SearchResponse,
    SearchResultsResponse,
    SuggestionListResponse,
    SuggestionResponse,
)
from .service import SearchSort, SearchType, SuggestionType


router = APIRouter(prefix="/v1/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search(
    service: SearchServiceDep,
    q: str | None = None,
    type: SearchType = "all",
    category: str | None = None,
    author: str | None = None,
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
    sort_by: Annotated[SearchSort, Query(alias="sortBy")] = "relevance",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> SearchResponse:
    """Search posts, users and comments.

    ``category`` is a category slug and ``author`` a username.
    """
    try:
        found = await service.search(
            q,
            kind=type,
            category=category,
            author=author,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            page=page,
            limit=limit,
        )
        posts = await service.post_service.to_responses(found.posts)
    except BlogError as e:
        raise handle_blog_error(e) from e

    comments = []
    for comment, post in found.comments:
        response = UserCommentResponse.from_comment(comment)
        response.post = PostSummary.from_post(post) if post else None
        comments.append(response)

    return SearchResponse(
        query=q or "",
        type=type,
        results=SearchResultsResponse(
            posts=posts,
            users=[
                ProfileResponse.from_profile(profile, user.username, user.created_at)
                for user, profile in found.users
            ],
            comments=comments,
            total=found.total,
        ),
        pagination=PaginationInfo.build(page, limit, found.total),
    )


@router.get("/suggestions", response_model=SuggestionListResponse)
async def suggestions(
    service: SearchServiceDep,
    q: str | None = None,
    type: SuggestionType = "all",
) -> SuggestionListResponse:
    """Autocomplete; empty for queries shorter than two characters."""
    try:
        found = await service.suggestions(q, kind=type)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return SuggestionListResponse(
        suggestions=[
            SuggestionResponse(type=s.type, title=s.title, url=s.url) for s in found
        ]
    )


@router.get("/post/{post_id}", response_model=PostCommentSearchResponse)
async def search_post_comments(
    post_id: UUID,
    service: SearchServiceDep,
    q: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PostCommentSearchResponse:
    try:
        comments, total = await service.search_post_comments(post_id, q, page, limit)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return PostCommentSearchResponse(
        comments=[CommentResponse.from_comment(c) for c in comments],
        pagination=PaginationInfo.build(page, limit, total),
    )

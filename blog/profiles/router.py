"""Profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from blog.auth.dependencies import CurrentUser
from blog.auth.schemas import UserResponse
from blog.core.exceptions import BlogError, handle_blog_error

from .dependencies import ProfileServiceDep
from .models import UserProfile
from .schemas import (
    MyProfileResponse,
    NotificationSettings,
    ProfileResponse,
    PublicProfileResponse,
    RecentComment,
    RecentPost,
    UpdateProfileRequest,
    UserStatsResponse,
)


router = APIRouter(prefix="/v1/profiles", tags=["profiles"])


def _my_profile(profile: UserProfile, user: UserResponse) -> MyProfileResponse:
    base = ProfileResponse.from_profile(profile, user.username, user.created_at)
    return MyProfileResponse(
        **base.model_dump(),
        email=user.email,
        notification_settings=NotificationSettings(**profile.notification_settings),
    )


@router.get("/me", response_model=MyProfileResponse)
async def get_my_profile(
    service: ProfileServiceDep,
    user: CurrentUser,
) -> MyProfileResponse:
    """Get the caller's profile, creating it on first access."""
    try:
        profile = await service.get_or_create(user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return _my_profile(profile, user)


@router.put("/me", response_model=MyProfileResponse)
async def update_my_profile(
    data: UpdateProfileRequest,
    service: ProfileServiceDep,
    user: CurrentUser,
) -> MyProfileResponse:
    try:
        profile = await service.update_profile(user.id, data)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return _my_profile(profile, user)


@router.get("/search/{query}", response_model=list[ProfileResponse])
async def search_profiles(
    query: str,
    service: ProfileServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[ProfileResponse]:
    """Public profiles whose username contains ``query``."""
    try:
        results = await service.search_profiles(query, page, limit)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return [
        ProfileResponse.from_profile(profile, user.username, user.created_at)
        for user, profile in results
    ]


@router.get("/{username}", response_model=PublicProfileResponse)
async def get_public_profile(
    username: str,
    service: ProfileServiceDep,
) -> PublicProfileResponse:
    """Public profile with the five most recent posts and comments."""
    try:
        user, profile, posts, comments = await service.get_public(username)
    except BlogError as e:
        raise handle_blog_error(e) from e

    return PublicProfileResponse(
        profile=ProfileResponse.from_profile(profile, user.username, user.created_at),
        recent_posts=[RecentPost.from_post(p) for p in posts],
        recent_comments=[RecentComment.from_comment(c, post) for c, post in comments],
    )


@router.get("/{username}/stats", response_model=UserStatsResponse)
async def get_user_stats(
    username: str,
    service: ProfileServiceDep,
) -> UserStatsResponse:
    """Recompute the user's stats, refreshing the cached profile figures."""
    try:
        user, stats, profile = await service.resync(username)
    except BlogError as e:
        raise handle_blog_error(e) from e

    return UserStatsResponse(
        posts_count=stats.posts_count,
        comments_count=stats.comments_count,
        total_views=stats.views_count,
        total_likes=stats.likes_received,
        join_date=user.created_at,
        badges=sorted(profile.badges) if profile else [],
    )

"""Pydantic schemas for user profiles."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from blog.comments.models import Comment
from blog.posts.models import Post
from blog.posts.schemas import PostSummary
from blog.utils.text import sanitize_html

from .models import ProfileStats, UserProfile


# ==============================================================================
# Request Schemas
# ==============================================================================


class SocialLinks(BaseModel):
    twitter: str | None = None
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None


class NotificationSettings(BaseModel):
    email_notifications: bool = True
    comment_notifications: bool = True
    follow_notifications: bool = True


class UpdateProfileRequest(BaseModel):
    """Partial profile update; ``None`` keeps the stored value."""

    bio: str | None = Field(default=None, max_length=500)
    avatar: str | None = None
    social_links: SocialLinks | None = None
    skills: list[str] | None = None
    interests: list[str] | None = None
    location: str | None = Field(default=None, max_length=100)
    website: str | None = Field(default=None, max_length=200)
    is_public: bool | None = None
    notification_settings: NotificationSettings | None = None

    @field_validator("skills", "interests")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        cleaned = [t.strip() for t in v if t and t.strip()]
        if any(len(t) > 50 for t in cleaned):
            raise ValueError("Each entry must be at most 50 characters")
        return cleaned


# ==============================================================================
# Response Schemas
# ==============================================================================


class ProfileStatsResponse(BaseModel):
    posts_count: int
    comments_count: int
    views_count: int
    likes_received: int

    @classmethod
    def from_stats(cls, stats: ProfileStats) -> "ProfileStatsResponse":
        return cls(
            posts_count=stats.posts_count,
            comments_count=stats.comments_count,
            views_count=stats.views_count,
            likes_received=stats.likes_received,
        )


class ProfileResponse(BaseModel):
    """Profile joined with its account's public fields."""

    user_id: UUID
    username: str
    bio: str
    avatar: str
    social_links: SocialLinks
    skills: list[str]
    interests: list[str]
    location: str
    website: str
    badges: list[str]
    is_public: bool
    stats: ProfileStatsResponse
    joined_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(
        cls,
        profile: UserProfile,
        username: str,
        joined_at: datetime | None = None,
    ) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            username=username,
            bio=profile.bio,
            avatar=profile.avatar,
            social_links=SocialLinks(**profile.social_links),
            skills=sorted(profile.skills),
            interests=sorted(profile.interests),
            location=profile.location,
            website=profile.website,
            badges=sorted(profile.badges),
            is_public=profile.is_public,
            stats=ProfileStatsResponse.from_stats(profile.stats),
            joined_at=joined_at,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class MyProfileResponse(ProfileResponse):
    """Owner view; includes the private notification settings."""

    email: str
    notification_settings: NotificationSettings


class RecentPost(PostSummary):
    views: int
    likes_count: int
    created_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> "RecentPost":
        return cls(
            id=post.post_id,
            title=post.title,
            slug=post.slug,
            views=post.views,
            likes_count=post.likes_count,
            created_at=post.created_at,
        )


class RecentComment(BaseModel):
    id: UUID
    content: str
    post: PostSummary | None = None
    created_at: datetime

    @classmethod
    def from_comment(
        cls, comment: Comment, post: Post | None = None
    ) -> "RecentComment":
        return cls(
            id=comment.comment_id,
            content=sanitize_html(comment.content),
            post=PostSummary.from_post(post) if post else None,
            created_at=comment.created_at,
        )


class PublicProfileResponse(BaseModel):
    profile: ProfileResponse
    recent_posts: list[RecentPost]
    recent_comments: list[RecentComment]


class UserStatsResponse(BaseModel):
    """Freshly aggregated figures for one account."""

    posts_count: int
    comments_count: int
    total_views: int
    total_likes: int
    join_date: datetime | None = None
    badges: list[str] = []

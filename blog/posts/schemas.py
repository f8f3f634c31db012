"""Pydantic schemas for posts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog.auth.schemas import AuthorSummary
from blog.categories.models import Category
from blog.categories.schemas import CategorySummary

from .models import Post


# ==============================================================================
# Request Schemas
# ==============================================================================


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    return [t.strip() for t in tags if t and t.strip()]


class CreatePostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    excerpt: str = Field(default="", max_length=500)
    category_id: UUID | None = None
    tags: list[str] = Field(default_factory=list)
    featured_image: str = ""
    published: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Title cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v) or []


class UpdatePostRequest(BaseModel):
    """Partial update; ``None`` keeps the stored value."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=500)
    category_id: UUID | None = None
    tags: list[str] | None = None
    featured_image: str | None = None
    published: bool | None = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


# ==============================================================================
# Response Schemas
# ==============================================================================


class PostSummary(BaseModel):
    """Minimal post reference (comment listings, profiles)."""

    id: UUID
    title: str
    slug: str

    @classmethod
    def from_post(cls, post: Post) -> "PostSummary":
        return cls(id=post.post_id, title=post.title, slug=post.slug)


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str
    author: AuthorSummary
    category: CategorySummary | None = None
    tags: list[str]
    featured_image: str
    published: bool
    views: int
    likes: list[UUID]
    likes_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post, category: Category | None = None) -> "PostResponse":
        """Build a response; ``category`` is None for unset or dangling references."""
        return cls(
            id=post.post_id,
            title=post.title,
            slug=post.slug,
            content=post.content,
            excerpt=post.excerpt,
            author=AuthorSummary(id=post.author_id, username=post.author_name),
            category=CategorySummary.from_category(category) if category else None,
            tags=sorted(post.tags),
            featured_image=post.featured_image,
            published=post.published,
            views=post.views,
            likes=sorted(post.likes, key=str),
            likes_count=post.likes_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total: int
    total_pages: int
    current_page: int


class PostLikeResponse(BaseModel):
    likes: int
    liked: bool

"""Database models for posts.

Posts are stored in one table keyed by ``post_id`` with secondary indexes on
slug (public URLs), author and category. ``views`` is a plain INT updated by
read-modify-write and ``likes`` is the set of accounts that liked the post;
its size is the like count.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from blog.utils.text import generate_slug
from blog.utils.timestamps import ensure_utc_aware, utc_now


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    post_id UUID PRIMARY KEY,
    title TEXT,
    slug TEXT,
    content TEXT,
    excerpt TEXT,
    author_id UUID,
    author_name TEXT,
    category_id UUID,
    tags SET<TEXT>,
    featured_image TEXT,
    published BOOLEAN,
    views INT,
    likes SET<UUID>,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

POST_SLUG_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS posts_slug_idx ON {keyspace}.posts (slug)
"""

POST_AUTHOR_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS posts_author_idx ON {keyspace}.posts (author_id)
"""

POST_CATEGORY_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS posts_category_idx ON {keyspace}.posts (category_id)
"""

POSTS_TABLES_CQL = [
    POST_TABLE_CQL,
    POST_SLUG_INDEX_CQL,
    POST_AUTHOR_INDEX_CQL,
    POST_CATEGORY_INDEX_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Post:
    """Blog article, published or draft."""

    post_id: UUID
    title: str
    slug: str
    content: str
    excerpt: str
    author_id: UUID
    author_name: str
    category_id: UUID | None
    tags: set[str] = field(default_factory=set)
    featured_image: str = ""
    published: bool = False
    views: int = 0
    likes: set[UUID] = field(default_factory=set)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def likes_count(self) -> int:
        return len(self.likes)

    def is_liked_by(self, user_id: UUID) -> bool:
        return user_id in self.likes

    @classmethod
    def from_row(cls, row: Any) -> "Post":
        """Create Post from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at) or utc_now()
        return cls(
            post_id=row.post_id,
            title=row.title,
            slug=row.slug,
            content=row.content or "",
            excerpt=row.excerpt or "",
            author_id=row.author_id,
            author_name=row.author_name or "",
            category_id=row.category_id,
            tags=set(row.tags or ()),
            featured_image=row.featured_image or "",
            published=bool(row.published),
            views=row.views or 0,
            likes=set(row.likes or ()),
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )


def create_post(
    title: str,
    content: str,
    author_id: UUID,
    author_name: str,
    excerpt: str = "",
    category_id: UUID | None = None,
    tags: list[str] | None = None,
    featured_image: str = "",
    published: bool = False,
) -> Post:
    """Create a new post with its slug derived from the title."""
    now = utc_now()
    return Post(
        post_id=uuid4(),
        title=title,
        slug=generate_slug(title),
        content=content,
        excerpt=excerpt,
        author_id=author_id,
        author_name=author_name,
        category_id=category_id,
        tags=set(tags or ()),
        featured_image=featured_image,
        published=published,
        views=0,
        likes=set(),
        created_at=now,
        updated_at=now,
    )

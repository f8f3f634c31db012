"""Database models for threaded post comments.

Cassandra table definitions and entities for comments on posts.

Architecture: adjacency list with denormalized counters
- parent_id references the parent comment (NULL for top-level comments)
- the parent keeps an ordered ``replies`` list of child ids and an
  independently maintained ``replies_count``
- likes are a map of account id to like time; ``likes_count`` mirrors its size
- soft delete keeps the row and overwrites the content with a placeholder
- reports accumulate until the moderation threshold hides the comment
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from blog.utils.timestamps import ensure_utc_aware, utc_now


DELETED_PLACEHOLDER = "[This comment has been deleted]"
MAX_COMMENT_LENGTH = 1000
REPORT_THRESHOLD = 5


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    comment_id UUID PRIMARY KEY,
    post_id UUID,
    parent_id UUID,
    author_id UUID,
    author_name TEXT,
    content TEXT,
    likes MAP<UUID, TIMESTAMP>,
    likes_count INT,
    replies LIST<UUID>,
    replies_count INT,
    is_edited BOOLEAN,
    edited_at TIMESTAMP,
    is_deleted BOOLEAN,
    deleted_at TIMESTAMP,
    report_count INT,
    reported_by SET<UUID>,
    is_approved BOOLEAN,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Listing by post (threads), by author (profiles) and by parent (replies)
COMMENT_POST_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_post_idx ON {keyspace}.comments (post_id)
"""

COMMENT_AUTHOR_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_author_idx ON {keyspace}.comments (author_id)
"""

COMMENT_PARENT_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_parent_idx ON {keyspace}.comments (parent_id)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
    COMMENT_POST_INDEX_CQL,
    COMMENT_AUTHOR_INDEX_CQL,
    COMMENT_PARENT_INDEX_CQL,
]


# ==============================================================================
# Comment Body States
# ==============================================================================


@dataclass
class ActiveBody:
    """Visible content; editable by the author."""

    content: str
    is_edited: bool = False
    edited_at: datetime | None = None


@dataclass
class DeletedBody:
    """Terminal state after soft delete; the content is gone."""

    deleted_at: datetime


CommentBody = ActiveBody | DeletedBody


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Comment entity with threading, likes and moderation state."""

    comment_id: UUID
    post_id: UUID
    author_id: UUID
    author_name: str
    body: CommentBody
    parent_id: UUID | None = None
    likes: dict[UUID, datetime] = field(default_factory=dict)
    likes_count: int = 0
    replies: list[UUID] = field(default_factory=list)
    replies_count: int = 0
    report_count: int = 0
    reported_by: set[UUID] = field(default_factory=set)
    is_approved: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    # --------------------------------------------------------------------------
    # Derived state
    # --------------------------------------------------------------------------

    @property
    def is_deleted(self) -> bool:
        return isinstance(self.body, DeletedBody)

    @property
    def content(self) -> str:
        if isinstance(self.body, DeletedBody):
            return DELETED_PLACEHOLDER
        return self.body.content

    @property
    def is_edited(self) -> bool:
        return isinstance(self.body, ActiveBody) and self.body.is_edited

    @property
    def edited_at(self) -> datetime | None:
        return self.body.edited_at if isinstance(self.body, ActiveBody) else None

    @property
    def deleted_at(self) -> datetime | None:
        return self.body.deleted_at if isinstance(self.body, DeletedBody) else None

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @property
    def is_visible(self) -> bool:
        """Shown in default listings: not deleted and not hidden by reports."""
        return not self.is_deleted and self.is_approved

    def is_liked_by(self, user_id: UUID) -> bool:
        return user_id in self.likes

    # --------------------------------------------------------------------------
    # Transitions
    # --------------------------------------------------------------------------

    def edit(self, content: str, now: datetime | None = None) -> None:
        """Replace the content. Only valid while the comment is active."""
        if isinstance(self.body, DeletedBody):
            msg = "Cannot edit a deleted comment"
            raise ValueError(msg)
        now = now or utc_now()
        self.body = ActiveBody(content=content, is_edited=True, edited_at=now)
        self.updated_at = now

    def soft_delete(self, now: datetime | None = None) -> bool:
        """Move to the deleted state. Returns False if already deleted."""
        if self.is_deleted:
            return False
        now = now or utc_now()
        self.body = DeletedBody(deleted_at=now)
        self.updated_at = now
        return True

    def toggle_like(self, user_id: UUID, now: datetime | None = None) -> bool:
        """Flip ``user_id``'s like and resync ``likes_count``.

        Returns:
            True if the comment is now liked by the user
        """
        if user_id in self.likes:
            del self.likes[user_id]
            liked = False
        else:
            self.likes[user_id] = now or utc_now()
            liked = True
        self.likes_count = len(self.likes)
        return liked

    def report(
        self,
        reporter_id: UUID,
        threshold: int = REPORT_THRESHOLD,
        dedup: bool = False,
    ) -> bool:
        """Register a report; at ``threshold`` the comment is hidden for good.

        With ``dedup`` a repeat report by the same account changes nothing.

        Returns:
            True if the report was counted
        """
        if dedup and reporter_id in self.reported_by:
            return False
        self.reported_by.add(reporter_id)
        self.report_count += 1
        if self.report_count >= threshold:
            self.is_approved = False
        return True

    # --------------------------------------------------------------------------
    # Persistence
    # --------------------------------------------------------------------------

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at) or utc_now()
        updated_at = ensure_utc_aware(row.updated_at) or created_at

        body: CommentBody
        if row.is_deleted:
            body = DeletedBody(deleted_at=ensure_utc_aware(row.deleted_at) or updated_at)
        else:
            body = ActiveBody(
                content=row.content or "",
                is_edited=bool(row.is_edited),
                edited_at=ensure_utc_aware(row.edited_at),
            )

        likes = {
            user_id: ensure_utc_aware(liked_at) or created_at
            for user_id, liked_at in (row.likes or {}).items()
        }
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            author_id=row.author_id,
            author_name=row.author_name or "",
            body=body,
            parent_id=row.parent_id,
            likes=likes,
            likes_count=row.likes_count or 0,
            replies=list(row.replies or ()),
            replies_count=row.replies_count or 0,
            report_count=row.report_count or 0,
            reported_by=set(row.reported_by or ()),
            is_approved=True if row.is_approved is None else bool(row.is_approved),
            created_at=created_at,
            updated_at=updated_at,
        )


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_comment(
    post_id: UUID,
    author_id: UUID,
    author_name: str,
    content: str,
    parent_id: UUID | None = None,
) -> Comment:
    """Create a new comment with default values."""
    now = utc_now()
    return Comment(
        comment_id=uuid4(),
        post_id=post_id,
        author_id=author_id,
        author_name=author_name,
        body=ActiveBody(content=content),
        parent_id=parent_id,
        created_at=now,
        updated_at=now,
    )

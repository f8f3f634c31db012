"""Comment system service layer.

Business logic for:
- Threaded comments on posts with denormalized reply counters
- Like toggling
- Author-only edit and soft delete
- Report-based auto-hide
- Per-author rate limiting (Redis, optional)

Counters are maintained with read-modify-write and no locking; concurrent
requests on the same comment may lose updates.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from blog.auth.schemas import UserResponse
from blog.core.exceptions import (
    ForbiddenError,
    InvalidParentError,
    NotFoundError,
    RateLimitExceededError,
    ValidationFailedError,
)
from blog.core.logging import get_logger
from blog.core.redis import rate_limit_key
from blog.core.service import CassandraService
from blog.posts.models import Post
from blog.posts.service import PostNotFoundError
from blog.utils.pagination import paginate
from blog.utils.text import search_pattern
from blog.utils.timestamps import in_range

from .models import (
    DELETED_PLACEHOLDER,
    MAX_COMMENT_LENGTH,
    REPORT_THRESHOLD,
    Comment,
    create_comment,
)


if TYPE_CHECKING:
    from datetime import datetime

    from cassandra.cluster import Session
    from redis.asyncio import Redis

    from blog.posts.service import PostService
    from blog.profiles.service import ProfileService


logger = get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CommentNotFoundError(NotFoundError):
    def __init__(self, message: str = "Comment not found"):
        super().__init__(message)


# ==============================================================================
# Content Rules
# ==============================================================================


def validate_content(content: str | None, max_length: int = MAX_COMMENT_LENGTH) -> str:
    """Trim and check comment content.

    Raises:
        ValidationFailedError: If the trimmed content is empty or too long
    """
    content = (content or "").strip()
    if not 1 <= len(content) <= max_length:
        raise ValidationFailedError(
            f"Comment must be between 1 and {max_length} characters"
        )
    return content


def sort_comments(comments: list[Comment], sort: str) -> list[Comment]:
    """Order top-level comments; unknown sort keys fall back to newest."""
    if sort == "oldest":
        return sorted(comments, key=lambda c: c.created_at)
    if sort == "popular":
        return sorted(
            comments, key=lambda c: (c.likes_count, c.created_at), reverse=True
        )
    return sorted(comments, key=lambda c: c.created_at, reverse=True)


# ==============================================================================
# Comment Service
# ==============================================================================


class CommentService(CassandraService):
    """Service for comment management."""

    # Rate limits
    COMMENTS_PER_MINUTE = 10
    COMMENTS_PER_HOUR = 100

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        post_service: "PostService",
        profile_service: "ProfileService | None" = None,
        redis: "Redis | None" = None,
        report_threshold: int = REPORT_THRESHOLD,
        report_dedup: bool = False,
        max_length: int = MAX_COMMENT_LENGTH,
    ):
        self.post_service = post_service
        self.profile_service = profile_service
        self.redis = redis
        self.report_threshold = report_threshold
        self.report_dedup = report_dedup
        self.max_length = max_length
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_comment = self._prepare("""
            INSERT INTO {keyspace}.comments
            (comment_id, post_id, parent_id, author_id, author_name, content,
             likes, likes_count, replies, replies_count, is_edited, edited_at,
             is_deleted, deleted_at, report_count, reported_by, is_approved,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._get_comment = self._prepare(
            "SELECT * FROM {keyspace}.comments WHERE comment_id = ?"
        )
        self._get_comments_by_post = self._prepare(
            "SELECT * FROM {keyspace}.comments WHERE post_id = ?"
        )
        # Lightweight projection used for listing totals
        self._count_scan_by_post = self._prepare("""
            SELECT comment_id, parent_id, is_deleted, is_approved
            FROM {keyspace}.comments WHERE post_id = ?
        """)
        self._get_comments_by_author = self._prepare(
            "SELECT * FROM {keyspace}.comments WHERE author_id = ?"
        )
        self._get_all_comments = self._prepare("SELECT * FROM {keyspace}.comments")
        self._update_content = self._prepare("""
            UPDATE {keyspace}.comments
            SET content = ?, is_edited = ?, edited_at = ?, updated_at = ?
            WHERE comment_id = ?
        """)
        self._soft_delete = self._prepare("""
            UPDATE {keyspace}.comments
            SET content = ?, is_deleted = true, deleted_at = ?, updated_at = ?
            WHERE comment_id = ?
        """)
        self._append_reply = self._prepare("""
            UPDATE {keyspace}.comments
            SET replies = replies + ?, replies_count = ?
            WHERE comment_id = ?
        """)
        self._update_replies_count = self._prepare(
            "UPDATE {keyspace}.comments SET replies_count = ? WHERE comment_id = ?"
        )
        self._update_likes = self._prepare("""
            UPDATE {keyspace}.comments
            SET likes = ?, likes_count = ?
            WHERE comment_id = ?
        """)
        self._update_moderation = self._prepare("""
            UPDATE {keyspace}.comments
            SET report_count = ?, reported_by = ?, is_approved = ?
            WHERE comment_id = ?
        """)

    # ==========================================================================
    # Rate Limiting (Redis-based)
    # ==========================================================================

    async def check_rate_limit(self, user_id: UUID) -> None:
        """Raise RateLimitExceededError when the author is over a window limit."""
        if not self.redis:
            return

        minute_count = await self.redis.get(
            rate_limit_key("comments", str(user_id), "minute")
        )
        if minute_count and int(minute_count) >= self.COMMENTS_PER_MINUTE:
            raise RateLimitExceededError("Too many comments per minute, wait a moment")

        hour_count = await self.redis.get(
            rate_limit_key("comments", str(user_id), "hour")
        )
        if hour_count and int(hour_count) >= self.COMMENTS_PER_HOUR:
            raise RateLimitExceededError("Hourly comment limit reached")

    async def increment_rate_limit(self, user_id: UUID) -> None:
        if not self.redis:
            return

        key_minute = rate_limit_key("comments", str(user_id), "minute")
        key_hour = rate_limit_key("comments", str(user_id), "hour")

        pipe = self.redis.pipeline()
        pipe.incr(key_minute)
        pipe.expire(key_minute, 60)
        pipe.incr(key_hour)
        pipe.expire(key_hour, 3600)
        await pipe.execute()

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def get_comment(self, comment_id: UUID) -> Comment | None:
        row = await self._fetch_one(self._get_comment, [comment_id])
        return Comment.from_row(row) if row else None

    async def require_comment(self, comment_id: UUID) -> Comment:
        comment = await self.get_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError()
        return comment

    async def _comments_for_post(self, post_id: UUID) -> list[Comment]:
        rows = await self._execute(self._get_comments_by_post, [post_id])
        return [Comment.from_row(row) for row in rows]

    async def count_top_level(self, post_id: UUID) -> int:
        """Visible top-level comments of a post (separate round-trip)."""
        rows = await self._execute(self._count_scan_by_post, [post_id])
        return sum(
            1
            for row in rows
            if row.parent_id is None
            and not row.is_deleted
            and (row.is_approved is None or row.is_approved)
        )

    async def list_by_post(
        self,
        post_id: UUID,
        page: int = 1,
        limit: int = 20,
        sort: str = "newest",
    ) -> tuple[list[tuple[Comment, list[Comment]]], int]:
        """Visible top-level comments of a post with their visible replies.

        Replies are resolved from the parent's ``replies`` list, filtered with
        the same visibility rule and ordered oldest first. The total comes
        from a separate count read, so it may disagree with the page under
        concurrent writes.

        Returns:
            Tuple of ([(comment, replies)], total)
        """
        comments = await self._comments_for_post(post_id)
        by_id = {c.comment_id: c for c in comments}

        top_level = [c for c in comments if c.is_top_level and c.is_visible]
        page_items = paginate(sort_comments(top_level, sort), page, limit)

        threads = []
        for comment in page_items:
            replies = [
                by_id[reply_id]
                for reply_id in comment.replies
                if reply_id in by_id and by_id[reply_id].is_visible
            ]
            replies.sort(key=lambda r: r.created_at)
            threads.append((comment, replies))

        total = await self.count_top_level(post_id)
        return threads, total

    async def list_by_author(
        self,
        author_id: UUID,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[Comment, Post | None]], int]:
        """An author's non-deleted comments, newest first, with their post.

        The post is None when it has since been deleted.
        """
        rows = await self._execute(self._get_comments_by_author, [author_id])
        comments = [c for c in map(Comment.from_row, rows) if not c.is_deleted]
        comments.sort(key=lambda c: c.created_at, reverse=True)
        page_items = paginate(comments, page, limit)

        posts: dict[UUID, Post | None] = {}
        for comment in page_items:
            if comment.post_id not in posts:
                posts[comment.post_id] = await self.post_service.get_post(
                    comment.post_id
                )
        return [(c, posts[c.post_id]) for c in page_items], len(comments)

    async def search_in_post(
        self,
        post_id: UUID,
        query: str,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Comment], int]:
        """Non-deleted comments of one post whose content matches ``query``."""
        pattern = search_pattern(query)
        matches = [
            c
            for c in await self._comments_for_post(post_id)
            if not c.is_deleted and pattern.search(c.content)
        ]
        matches.sort(key=lambda c: c.created_at, reverse=True)
        return paginate(matches, page, limit), len(matches)

    async def search_comments(
        self,
        query: str,
        date_from: "datetime | None" = None,
        date_to: "datetime | None" = None,
    ) -> list[Comment]:
        """All non-deleted comments matching ``query``, newest first."""
        pattern = search_pattern(query)
        rows = await self._execute(self._get_all_comments)
        matches = [
            c
            for c in map(Comment.from_row, rows)
            if not c.is_deleted
            and pattern.search(c.content)
            and in_range(c.created_at, date_from, date_to)
        ]
        return sorted(matches, key=lambda c: c.created_at, reverse=True)

    # ==========================================================================
    # Comment CRUD
    # ==========================================================================

    async def create_comment(
        self,
        content: str,
        post_id: UUID,
        author: UserResponse,
        parent_id: UUID | None = None,
    ) -> Comment:
        """Create a comment or a reply.

        Validation and lookups run before any write:
        - content must be 1..max_length characters after trimming
        - the post must exist
        - a parent must exist and belong to the same post

        Raises:
            ValidationFailedError: Bad content
            RateLimitExceededError: Author over the rate limit
            PostNotFoundError: Unknown post
            InvalidParentError: Missing parent or parent on another post
        """
        content = validate_content(content, self.max_length)
        await self.check_rate_limit(author.id)

        if await self.post_service.get_post(post_id) is None:
            raise PostNotFoundError()

        parent: Comment | None = None
        if parent_id is not None:
            parent = await self.get_comment(parent_id)
            if parent is None or parent.post_id != post_id:
                raise InvalidParentError()

        comment = create_comment(
            post_id=post_id,
            author_id=author.id,
            author_name=author.username,
            content=content,
            parent_id=parent_id,
        )
        await self._execute(
            self._insert_comment,
            [
                comment.comment_id,
                comment.post_id,
                comment.parent_id,
                comment.author_id,
                comment.author_name,
                comment.content,
                comment.likes,
                comment.likes_count,
                comment.replies,
                comment.replies_count,
                comment.is_edited,
                comment.edited_at,
                comment.is_deleted,
                comment.deleted_at,
                comment.report_count,
                comment.reported_by,
                comment.is_approved,
                comment.created_at,
                comment.updated_at,
            ],
        )

        if parent is not None:
            await self._execute(
                self._append_reply,
                [[comment.comment_id], parent.replies_count + 1, parent.comment_id],
            )

        await self.increment_rate_limit(author.id)
        await self._adjust_profile_comments(author.id, 1)

        logger.info(
            "comment_created",
            comment_id=str(comment.comment_id),
            post_id=str(post_id),
            parent_id=str(parent_id) if parent_id else None,
        )
        return comment

    async def update_comment(
        self,
        comment_id: UUID,
        content: str,
        requester_id: UUID,
    ) -> Comment:
        """Replace a comment's content (author only, active comments only).

        Raises:
            ValidationFailedError: Bad content
            CommentNotFoundError: Missing or already deleted
            ForbiddenError: Requester is not the author
        """
        content = validate_content(content, self.max_length)

        comment = await self.get_comment(comment_id)
        if comment is None or comment.is_deleted:
            raise CommentNotFoundError()
        if comment.author_id != requester_id:
            raise ForbiddenError("Not authorized to edit this comment")

        comment.edit(content)
        await self._execute(
            self._update_content,
            [
                comment.content,
                comment.is_edited,
                comment.edited_at,
                comment.updated_at,
                comment.comment_id,
            ],
        )

        logger.info("comment_updated", comment_id=str(comment_id))
        return comment

    async def delete_comment(self, comment_id: UUID, requester_id: UUID) -> Comment:
        """Soft delete (author only).

        Overwrites the content with the placeholder, decrements the parent's
        ``replies_count`` (floored at zero) and the author's profile counter.
        Deleting an already deleted comment changes nothing.

        Raises:
            CommentNotFoundError: Missing comment
            ForbiddenError: Requester is not the author
        """
        comment = await self.require_comment(comment_id)
        if comment.author_id != requester_id:
            raise ForbiddenError("Not authorized to delete this comment")

        if not comment.soft_delete():
            return comment

        await self._execute(
            self._soft_delete,
            [DELETED_PLACEHOLDER, comment.deleted_at, comment.updated_at, comment_id],
        )

        if comment.parent_id is not None:
            await self._decrement_replies_count(comment.parent_id)

        await self._adjust_profile_comments(comment.author_id, -1)

        logger.info("comment_deleted", comment_id=str(comment_id))
        return comment

    async def _decrement_replies_count(self, parent_id: UUID) -> None:
        parent = await self.get_comment(parent_id)
        if parent is not None:
            await self._execute(
                self._update_replies_count,
                [max(0, parent.replies_count - 1), parent_id],
            )

    async def _adjust_profile_comments(self, user_id: UUID, delta: int) -> None:
        # A missing profile is skipped inside the profile service
        if self.profile_service is not None:
            await self.profile_service.adjust_comment_count(user_id, delta)

    # ==========================================================================
    # Likes & Reports
    # ==========================================================================

    async def toggle_like(self, comment_id: UUID, user_id: UUID) -> tuple[Comment, bool]:
        """Like or unlike a comment.

        Returns:
            Tuple of (updated comment, whether the user now likes it)
        """
        comment = await self.require_comment(comment_id)
        liked = comment.toggle_like(user_id)

        await self._execute(
            self._update_likes,
            [comment.likes, comment.likes_count, comment_id],
        )
        logger.info(
            "comment_like_toggled",
            comment_id=str(comment_id),
            liked=liked,
            likes_count=comment.likes_count,
        )
        return comment, liked

    async def report_comment(self, comment_id: UUID, reporter_id: UUID) -> Comment:
        """Count a report; at the threshold the comment is hidden for good."""
        comment = await self.require_comment(comment_id)
        was_approved = comment.is_approved

        if not comment.report(reporter_id, self.report_threshold, self.report_dedup):
            logger.info("comment_report_duplicate", comment_id=str(comment_id))
            return comment

        await self._execute(
            self._update_moderation,
            [
                comment.report_count,
                comment.reported_by,
                comment.is_approved,
                comment_id,
            ],
        )

        if was_approved and not comment.is_approved:
            logger.warning(
                "comment_auto_hidden",
                comment_id=str(comment_id),
                report_count=comment.report_count,
            )
        else:
            logger.info(
                "comment_reported",
                comment_id=str(comment_id),
                report_count=comment.report_count,
            )
        return comment

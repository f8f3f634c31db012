"""Search service.

Composes the post, account, profile, comment and category services. The store
has no text index, so every query is a literal, case-insensitive substring
match evaluated in memory over the candidate rows.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Literal
from uuid import UUID

from blog.core.exceptions import ValidationFailedError
from blog.core.logging import get_logger
from blog.utils.pagination import paginate
from blog.utils.text import search_pattern
from blog.utils.timestamps import in_range


if TYPE_CHECKING:
    from blog.auth.models import User
    from blog.auth.service import AuthService
    from blog.categories.service import CategoryService
    from blog.comments.models import Comment
    from blog.comments.service import CommentService
    from blog.posts.models import Post
    from blog.posts.service import PostService
    from blog.profiles.models import UserProfile
    from blog.profiles.service import ProfileService


logger = get_logger(__name__)

SearchType = Literal["all", "posts", "users", "comments"]
SuggestionType = Literal["all", "posts", "users", "categories"]
SearchSort = Literal["relevance", "newest", "oldest", "popular", "trending"]

MIN_SUGGESTION_LENGTH = 2
SUGGESTIONS_PER_KIND = 5
MAX_SUGGESTIONS = 10


@dataclass
class SearchResults:
    posts: list["Post"] = field(default_factory=list)
    users: list[tuple["User", "UserProfile"]] = field(default_factory=list)
    comments: list[tuple["Comment", "Post | None"]] = field(default_factory=list)
    total: int = 0


@dataclass
class Suggestion:
    type: str
    title: str
    url: str


def relevance(post: "Post", query: str) -> int:
    """Score a post by where the query hits: title, then excerpt, then content."""
    pattern = search_pattern(query)
    if pattern.search(post.title):
        return 3
    if pattern.search(post.excerpt):
        return 2
    if pattern.search(post.content):
        return 1
    return 0


def sort_posts(posts: list["Post"], sort_by: str, query: str) -> list["Post"]:
    """Order search hits; unknown sort keys fall back to relevance."""
    newest = sorted(posts, key=lambda p: p.created_at, reverse=True)
    if sort_by == "newest":
        return newest
    if sort_by == "oldest":
        return sorted(posts, key=lambda p: p.created_at)
    if sort_by == "popular":
        return sorted(newest, key=lambda p: (p.likes_count, p.views), reverse=True)
    if sort_by == "trending":
        return sorted(newest, key=lambda p: (p.views, p.likes_count), reverse=True)
    return sorted(newest, key=lambda p: relevance(p, query), reverse=True)


class SearchService:
    """Cross-entity search and autocomplete."""

    def __init__(
        self,
        post_service: "PostService",
        auth_service: "AuthService",
        profile_service: "ProfileService",
        comment_service: "CommentService",
        category_service: "CategoryService",
    ):
        self.post_service = post_service
        self.auth_service = auth_service
        self.profile_service = profile_service
        self.comment_service = comment_service
        self.category_service = category_service

    @staticmethod
    def _require_query(query: str | None) -> str:
        if not query or not query.strip():
            raise ValidationFailedError("Search query is required")
        return query.strip()

    async def _search_posts(
        self,
        query: str,
        category: str | None,
        author: str | None,
        date_from: datetime | None,
        date_to: datetime | None,
    ) -> list["Post"]:
        category_id: UUID | None = None
        if category:
            found = await self.category_service.find_by_slug(category)
            category_id = found.category_id if found else None

        author_id: UUID | None = None
        if author:
            user = await self.auth_service.get_user_by_username(author)
            author_id = user.id if user else None

        pattern = search_pattern(query)
        return [
            p
            for p in await self.post_service.list_published()
            if (
                pattern.search(p.title)
                or pattern.search(p.excerpt)
                or pattern.search(p.content)
            )
            and (category_id is None or p.category_id == category_id)
            and (author_id is None or p.author_id == author_id)
            and in_range(p.created_at, date_from, date_to)
        ]

    async def _with_posts(
        self, comments: list["Comment"]
    ) -> list[tuple["Comment", "Post | None"]]:
        posts: dict[UUID, Post | None] = {}
        for comment in comments:
            if comment.post_id not in posts:
                posts[comment.post_id] = await self.post_service.get_post(
                    comment.post_id
                )
        return [(c, posts[c.post_id]) for c in comments]

    async def search(
        self,
        query: str | None,
        kind: str = "all",
        category: str | None = None,
        author: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        sort_by: str = "relevance",
        page: int = 1,
        limit: int = 10,
    ) -> SearchResults:
        """Search posts, users and comments.

        Each kind is paginated independently with the same page and limit;
        ``total`` is the sum of the per-kind match counts. Category and
        author filters that do not resolve are ignored.

        Raises:
            ValidationFailedError: If ``query`` is missing or blank
        """
        query = self._require_query(query)
        results = SearchResults()

        if kind in ("all", "posts"):
            posts = await self._search_posts(
                query, category, author, date_from, date_to
            )
            results.posts = paginate(sort_posts(posts, sort_by, query), page, limit)
            results.total += len(posts)

        if kind in ("all", "users"):
            users = await self.auth_service.search_users(query)
            for user in paginate(users, page, limit):
                profile = await self.profile_service.get_profile(user.id)
                if profile is not None and profile.is_public:
                    results.users.append((user, profile))
            results.total += len(users)

        if kind in ("all", "comments"):
            comments = await self.comment_service.search_comments(
                query, date_from, date_to
            )
            results.comments = await self._with_posts(
                paginate(comments, page, limit)
            )
            results.total += len(comments)

        logger.debug("search_executed", kind=kind, total=results.total)
        return results

    async def suggestions(self, query: str | None, kind: str = "all") -> list[Suggestion]:
        """Autocomplete entries for post titles, usernames and category names."""
        if not query or len(query.strip()) < MIN_SUGGESTION_LENGTH:
            return []

        pattern = search_pattern(query)
        found: list[Suggestion] = []

        if kind in ("all", "posts"):
            posts = [
                p for p in await self.post_service.list_published()
                if pattern.search(p.title)
            ]
            found.extend(
                Suggestion("post", p.title, f"/post/{p.slug}")
                for p in posts[:SUGGESTIONS_PER_KIND]
            )

        if kind in ("all", "users"):
            users = await self.auth_service.search_users(query, SUGGESTIONS_PER_KIND)
            found.extend(
                Suggestion("user", u.username, f"/profile/{u.username}") for u in users
            )

        if kind in ("all", "categories"):
            categories = [
                c for c in await self.category_service.list_categories()
                if pattern.search(c.name)
            ]
            found.extend(
                Suggestion("category", c.name, f"/category/{c.slug}")
                for c in categories[:SUGGESTIONS_PER_KIND]
            )

        return found[:MAX_SUGGESTIONS]

    async def search_post_comments(
        self,
        post_id: UUID,
        query: str | None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list["Comment"], int]:
        """Non-deleted comments of one post matching ``query``, newest first."""
        query = self._require_query(query)
        return await self.comment_service.search_in_post(post_id, query, page, limit)

"""Post service layer.

Business logic for:
- Post CRUD with slug derivation and collision rejection
- View counting on every successful fetch by slug
- Per-account like toggling
"""

from typing import TYPE_CHECKING
from uuid import UUID

from blog.auth.permissions import is_author_or_admin
from blog.auth.schemas import UserResponse
from blog.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    SlugConflictError,
    ValidationFailedError,
)
from blog.core.logging import get_logger
from blog.core.service import CassandraService
from blog.utils.pagination import paginate
from blog.utils.text import generate_slug, matches_any, search_pattern
from blog.utils.timestamps import utc_now

from .models import Post, create_post
from .schemas import CreatePostRequest, PostResponse, UpdatePostRequest


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from blog.categories.service import CategoryService


logger = get_logger(__name__)


class PostNotFoundError(NotFoundError):
    def __init__(self, message: str = "Post not found"):
        super().__init__(message)


class PostService(CassandraService):
    """Posts and their view/like counters."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        category_service: "CategoryService | None" = None,
    ):
        self.category_service = category_service
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        self._get_post = self._prepare(
            "SELECT * FROM {keyspace}.posts WHERE post_id = ?"
        )
        self._get_post_by_slug = self._prepare(
            "SELECT * FROM {keyspace}.posts WHERE slug = ?"
        )
        self._get_posts_by_author = self._prepare(
            "SELECT * FROM {keyspace}.posts WHERE author_id = ?"
        )
        self._get_posts_by_category = self._prepare(
            "SELECT * FROM {keyspace}.posts WHERE category_id = ?"
        )
        self._get_all_posts = self._prepare("SELECT * FROM {keyspace}.posts")
        self._insert_post = self._prepare("""
            INSERT INTO {keyspace}.posts
            (post_id, title, slug, content, excerpt, author_id, author_name,
             category_id, tags, featured_image, published, views, likes,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._update_post = self._prepare("""
            UPDATE {keyspace}.posts
            SET title = ?, slug = ?, content = ?, excerpt = ?, category_id = ?,
                tags = ?, featured_image = ?, published = ?, updated_at = ?
            WHERE post_id = ?
        """)
        self._update_views = self._prepare(
            "UPDATE {keyspace}.posts SET views = ? WHERE post_id = ?"
        )
        self._add_like = self._prepare(
            "UPDATE {keyspace}.posts SET likes = likes + ? WHERE post_id = ?"
        )
        self._remove_like = self._prepare(
            "UPDATE {keyspace}.posts SET likes = likes - ? WHERE post_id = ?"
        )
        self._delete_post = self._prepare(
            "DELETE FROM {keyspace}.posts WHERE post_id = ?"
        )

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def get_post(self, post_id: UUID) -> Post | None:
        row = await self._fetch_one(self._get_post, [post_id])
        return Post.from_row(row) if row else None

    async def require_post(self, post_id: UUID) -> Post:
        post = await self.get_post(post_id)
        if post is None:
            raise PostNotFoundError()
        return post

    async def find_by_slug(self, slug: str) -> Post | None:
        row = await self._fetch_one(self._get_post_by_slug, [slug])
        return Post.from_row(row) if row else None

    async def get_by_slug(self, slug: str) -> Post:
        """Fetch a post for reading and count the view.

        Every successful fetch increments ``views``; there is no per-viewer
        de-duplication and concurrent reads may lose increments.
        """
        post = await self.find_by_slug(slug)
        if post is None:
            raise PostNotFoundError()

        post.views += 1
        await self._execute(self._update_views, [post.views, post.post_id])
        return post

    async def list_by_author(
        self, author_id: UUID, published_only: bool = False
    ) -> list[Post]:
        """Posts of one author, newest first."""
        rows = await self._execute(self._get_posts_by_author, [author_id])
        posts = [Post.from_row(row) for row in rows]
        if published_only:
            posts = [p for p in posts if p.published]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    async def list_published(self) -> list[Post]:
        """All published posts, newest first."""
        rows = await self._execute(self._get_all_posts)
        posts = [Post.from_row(row) for row in rows if row.published]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    async def _resolve_category_id(self, category: str) -> UUID | None:
        try:
            return UUID(category)
        except ValueError:
            pass
        if self.category_service is None:
            return None
        found = await self.category_service.find_by_slug(category)
        return found.category_id if found else None

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        search: str | None = None,
        published_only: bool = True,
    ) -> tuple[list[Post], int]:
        """Paginated listing, newest first.

        Args:
            category: Category id or slug; unknown categories match nothing
            search: Case-insensitive substring over title, content, excerpt
                and tags
            published_only: When False drafts are listed too

        Returns:
            Tuple of (page of posts, total matching)
        """
        if category:
            category_id = await self._resolve_category_id(category)
            if category_id is None:
                return [], 0
            rows = await self._execute(self._get_posts_by_category, [category_id])
        else:
            rows = await self._execute(self._get_all_posts)

        posts = [Post.from_row(row) for row in rows]
        if published_only:
            posts = [p for p in posts if p.published]
        if search and search.strip():
            pattern = search_pattern(search)
            posts = [
                p
                for p in posts
                if matches_any(pattern, p.title, p.content, p.excerpt, *p.tags)
            ]

        posts.sort(key=lambda p: p.created_at, reverse=True)
        return paginate(posts, page, limit), len(posts)

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def _ensure_slug_free(self, slug: str, post_id: UUID | None = None) -> None:
        if not slug:
            raise ValidationFailedError("Title must contain letters or digits")
        existing = await self.find_by_slug(slug)
        if existing is not None and existing.post_id != post_id:
            raise SlugConflictError("Post with this title already exists")

    async def create_post(self, data: CreatePostRequest, author: UserResponse) -> Post:
        """Create a post.

        Raises:
            ValidationFailedError: If the title yields an empty slug
            SlugConflictError: If another post derives the same slug
        """
        post = create_post(
            title=data.title,
            content=data.content,
            author_id=author.id,
            author_name=author.username,
            excerpt=data.excerpt,
            category_id=data.category_id,
            tags=data.tags,
            featured_image=data.featured_image,
            published=data.published,
        )
        await self._ensure_slug_free(post.slug)

        await self._execute(
            self._insert_post,
            [
                post.post_id,
                post.title,
                post.slug,
                post.content,
                post.excerpt,
                post.author_id,
                post.author_name,
                post.category_id,
                post.tags,
                post.featured_image,
                post.published,
                post.views,
                post.likes,
                post.created_at,
                post.updated_at,
            ],
        )
        logger.info(
            "post_created",
            post_id=str(post.post_id),
            slug=post.slug,
            published=post.published,
        )
        return post

    async def update_post(
        self, post_id: UUID, data: UpdatePostRequest, requester: UserResponse
    ) -> Post:
        """Update a post (author or admin).

        A title change re-derives the slug, which must still be unique.
        """
        post = await self.require_post(post_id)
        if not is_author_or_admin(post.author_id, requester.id, requester.role):
            raise ForbiddenError("Not authorized to update this post")

        if data.title is not None and data.title.strip() != post.title:
            post.title = data.title.strip()
            post.slug = generate_slug(post.title)
            await self._ensure_slug_free(post.slug, post.post_id)
        if data.content is not None:
            post.content = data.content
        if data.excerpt is not None:
            post.excerpt = data.excerpt
        if data.category_id is not None:
            post.category_id = data.category_id
        if data.tags is not None:
            post.tags = set(data.tags)
        if data.featured_image is not None:
            post.featured_image = data.featured_image
        if data.published is not None:
            post.published = data.published
        post.updated_at = utc_now()

        await self._execute(
            self._update_post,
            [
                post.title,
                post.slug,
                post.content,
                post.excerpt,
                post.category_id,
                post.tags,
                post.featured_image,
                post.published,
                post.updated_at,
                post.post_id,
            ],
        )
        logger.info("post_updated", post_id=str(post_id), slug=post.slug)
        return post

    async def delete_post(self, post_id: UUID, requester: UserResponse) -> None:
        """Hard delete (author or admin). Comments on the post are kept."""
        post = await self.require_post(post_id)
        if not is_author_or_admin(post.author_id, requester.id, requester.role):
            raise ForbiddenError("Not authorized to delete this post")

        await self._execute(self._delete_post, [post_id])
        logger.info("post_deleted", post_id=str(post_id), deleted_by=str(requester.id))

    async def toggle_like(self, post_id: UUID, user_id: UUID) -> tuple[int, bool]:
        """Add or remove ``user_id`` from the like set.

        Returns:
            Tuple of (like count after the toggle, whether the user now likes it)
        """
        post = await self.require_post(post_id)

        if post.is_liked_by(user_id):
            await self._execute(self._remove_like, [{user_id}, post_id])
            post.likes.discard(user_id)
            liked = False
        else:
            await self._execute(self._add_like, [{user_id}, post_id])
            post.likes.add(user_id)
            liked = True

        logger.info("post_like_toggled", post_id=str(post_id), liked=liked)
        return post.likes_count, liked

    # ==========================================================================
    # Responses
    # ==========================================================================

    async def to_responses(self, posts: list[Post]) -> list[PostResponse]:
        """Populate category summaries; dangling references render as None."""
        categories = {}
        if self.category_service is not None:
            categories = await self.category_service.get_categories(
                {p.category_id for p in posts if p.category_id}
            )
        return [
            PostResponse.from_post(p, categories.get(p.category_id)) for p in posts
        ]

    async def to_response(self, post: Post) -> PostResponse:
        responses = await self.to_responses([post])
        return responses[0]

"""Profile service.

Profiles are created lazily on first access by their owner. Stats are cached
on the profile row and refreshed by ``resync`` from the posts and comments
tables; the comment counter is also nudged by the comment service, which is
allowed to drift.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from blog.comments.models import Comment
from blog.core.exceptions import NotFoundError
from blog.core.logging import get_logger
from blog.core.service import CassandraService
from blog.posts.models import Post
from blog.utils.pagination import paginate
from blog.utils.timestamps import utc_now

from .models import ProfileStats, UserProfile
from .schemas import UpdateProfileRequest


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from blog.auth.models import User
    from blog.auth.service import AuthService
    from blog.posts.service import PostService


logger = get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 5


class ProfileNotFoundError(NotFoundError):
    def __init__(self, message: str = "Profile not found"):
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class ProfileService(CassandraService):
    """Profiles and their aggregated stats."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        auth_service: "AuthService",
        post_service: "PostService",
    ):
        self.auth_service = auth_service
        self.post_service = post_service
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        self._get_profile = self._prepare(
            "SELECT * FROM {keyspace}.user_profiles WHERE user_id = ?"
        )
        self._upsert_profile = self._prepare("""
            INSERT INTO {keyspace}.user_profiles
            (user_id, bio, avatar, social_links, skills, interests, location,
             website, badges, is_public, notification_settings, posts_count,
             comments_count, views_count, likes_received, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._update_stats = self._prepare("""
            UPDATE {keyspace}.user_profiles
            SET posts_count = ?, comments_count = ?, views_count = ?,
                likes_received = ?, updated_at = ?
            WHERE user_id = ?
        """)
        self._update_comments_count = self._prepare(
            "UPDATE {keyspace}.user_profiles SET comments_count = ? WHERE user_id = ?"
        )
        self._add_badges = self._prepare(
            "UPDATE {keyspace}.user_profiles SET badges = badges + ? WHERE user_id = ?"
        )
        # Read directly: the comment service depends on this service
        self._get_comments_by_author = self._prepare(
            "SELECT * FROM {keyspace}.comments WHERE author_id = ?"
        )

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        row = await self._fetch_one(self._get_profile, [user_id])
        return UserProfile.from_row(row) if row else None

    async def _require_user(self, username: str) -> "User":
        user = await self.auth_service.get_user_by_username(username)
        if user is None:
            raise UserNotFoundError()
        return user

    async def _save(self, profile: UserProfile) -> None:
        await self._execute(
            self._upsert_profile,
            [
                profile.user_id,
                profile.bio,
                profile.avatar,
                profile.social_links,
                profile.skills,
                profile.interests,
                profile.location,
                profile.website,
                profile.badges,
                profile.is_public,
                profile.notification_settings,
                profile.stats.posts_count,
                profile.stats.comments_count,
                profile.stats.views_count,
                profile.stats.likes_received,
                profile.created_at,
                profile.updated_at,
            ],
        )

    async def get_or_create(self, user_id: UUID) -> UserProfile:
        """Return the account's profile, creating an empty one on first access."""
        profile = await self.get_profile(user_id)
        if profile is not None:
            return profile

        profile = UserProfile(user_id=user_id)
        await self._save(profile)
        logger.info("profile_created", user_id=str(user_id))
        return profile

    async def update_profile(
        self, user_id: UUID, data: UpdateProfileRequest
    ) -> UserProfile:
        """Upsert the editable fields of the account's profile."""
        profile = await self.get_profile(user_id) or UserProfile(user_id=user_id)

        if data.bio is not None:
            profile.bio = data.bio
        if data.avatar is not None:
            profile.avatar = data.avatar
        if data.social_links is not None:
            profile.social_links = data.social_links.model_dump(exclude_none=True)
        if data.skills is not None:
            profile.skills = set(data.skills)
        if data.interests is not None:
            profile.interests = set(data.interests)
        if data.location is not None:
            profile.location = data.location
        if data.website is not None:
            profile.website = data.website
        if data.is_public is not None:
            profile.is_public = data.is_public
        if data.notification_settings is not None:
            profile.notification_settings = data.notification_settings.model_dump()
        profile.updated_at = utc_now()

        await self._save(profile)
        logger.info("profile_updated", user_id=str(user_id))
        return profile

    async def _comments_by_author(self, user_id: UUID) -> list[Comment]:
        rows = await self._execute(self._get_comments_by_author, [user_id])
        comments = [c for c in map(Comment.from_row, rows) if not c.is_deleted]
        comments.sort(key=lambda c: c.created_at, reverse=True)
        return comments

    async def get_public(
        self, username: str
    ) -> tuple["User", UserProfile, list[Post], list[tuple[Comment, Post | None]]]:
        """Public view of a profile with recent activity.

        Raises:
            UserNotFoundError: Unknown username
            ProfileNotFoundError: No profile yet, or the profile is private

        Returns:
            Tuple of (user, profile, recent posts, [(recent comment, its post)])
        """
        user = await self._require_user(username)
        profile = await self.get_profile(user.id)
        if profile is None or not profile.is_public:
            raise ProfileNotFoundError()

        posts = await self.post_service.list_by_author(user.id, published_only=True)
        comments = (await self._comments_by_author(user.id))[:RECENT_ACTIVITY_LIMIT]

        recent_comments = []
        for comment in comments:
            post = await self.post_service.get_post(comment.post_id)
            recent_comments.append((comment, post))

        return user, profile, posts[:RECENT_ACTIVITY_LIMIT], recent_comments

    async def search_profiles(
        self, query: str, page: int = 1, limit: int = 10
    ) -> list[tuple["User", UserProfile]]:
        """Public profiles whose username contains ``query``, by username."""
        users = paginate(await self.auth_service.search_users(query), page, limit)

        results = []
        for user in users:
            profile = await self.get_profile(user.id)
            if profile is not None and profile.is_public:
                results.append((user, profile))
        return results

    # ==========================================================================
    # Stats
    # ==========================================================================

    async def adjust_comment_count(self, user_id: UUID, delta: int) -> None:
        """Best-effort shift of the cached comment counter.

        Accounts without a profile are skipped; the next resync corrects any
        drift.
        """
        profile = await self.get_profile(user_id)
        if profile is None:
            logger.debug("profile_counter_skipped", user_id=str(user_id))
            return

        count = profile.adjust_comments(delta)
        await self._execute(self._update_comments_count, [count, user_id])

    async def compute_stats(self, user_id: UUID) -> ProfileStats:
        """Aggregate stats from the authoritative posts and comments."""
        posts = await self.post_service.list_by_author(user_id)
        comments = await self._comments_by_author(user_id)
        return ProfileStats(
            posts_count=len(posts),
            comments_count=len(comments),
            views_count=sum(p.views for p in posts),
            likes_received=sum(p.likes_count for p in posts),
        )

    async def resync(
        self, username: str
    ) -> tuple["User", ProfileStats, UserProfile | None]:
        """Recompute a user's stats and, if they have a profile, persist them.

        Badges earned by the new stats are merged into the profile; existing
        badges are kept.

        Returns:
            Tuple of (user, fresh stats, updated profile or None)
        """
        user = await self._require_user(username)
        stats = await self.compute_stats(user.id)

        profile = await self.get_profile(user.id)
        if profile is None:
            return user, stats, None

        profile.stats = stats
        profile.updated_at = utc_now()
        await self._execute(
            self._update_stats,
            [
                stats.posts_count,
                stats.comments_count,
                stats.views_count,
                stats.likes_received,
                profile.updated_at,
                user.id,
            ],
        )

        new_badges = profile.check_badges()
        if new_badges:
            await self._execute(self._add_badges, [new_badges, user.id])

        logger.info(
            "profile_stats_resynced",
            user_id=str(user.id),
            posts_count=stats.posts_count,
            comments_count=stats.comments_count,
            badges_awarded=sorted(new_badges),
        )
        return user, stats, profile

"""Database models for user profiles.

One row per account, keyed by ``user_id``. The ``*_count`` columns are a
cache of figures aggregated from posts and comments; they are overwritten by
a resync rather than trusted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from blog.utils.timestamps import ensure_utc_aware, utc_now


# ==============================================================================
# Enums
# ==============================================================================


class Badge(str, Enum):
    EARLY_ADOPTER = "early_adopter"
    TOP_CONTRIBUTOR = "top_contributor"
    HELPFUL_MEMBER = "helpful_member"
    EXPERT_WRITER = "expert_writer"
    COMMUNITY_LEADER = "community_leader"


SOCIAL_LINK_KEYS = ("twitter", "linkedin", "github", "website")
NOTIFICATION_KEYS = (
    "email_notifications",
    "comment_notifications",
    "follow_notifications",
)


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

PROFILE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.user_profiles (
    user_id UUID PRIMARY KEY,
    bio TEXT,
    avatar TEXT,
    social_links MAP<TEXT, TEXT>,
    skills SET<TEXT>,
    interests SET<TEXT>,
    location TEXT,
    website TEXT,
    badges SET<TEXT>,
    is_public BOOLEAN,
    notification_settings MAP<TEXT, BOOLEAN>,
    posts_count INT,
    comments_count INT,
    views_count INT,
    likes_received INT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

PROFILES_TABLES_CQL = [
    PROFILE_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class ProfileStats:
    posts_count: int = 0
    comments_count: int = 0
    views_count: int = 0
    likes_received: int = 0


def award_badges(stats: ProfileStats) -> set[str]:
    """Badges earned by the given stats, by threshold."""
    earned = set()
    if stats.posts_count >= 1:
        earned.add(Badge.EARLY_ADOPTER.value)
    if stats.posts_count >= 10:
        earned.add(Badge.EXPERT_WRITER.value)
    if stats.comments_count >= 25:
        earned.add(Badge.HELPFUL_MEMBER.value)
    if stats.likes_received >= 50:
        earned.add(Badge.TOP_CONTRIBUTOR.value)
    if stats.posts_count >= 20 and stats.comments_count >= 50:
        earned.add(Badge.COMMUNITY_LEADER.value)
    return earned


def default_notification_settings() -> dict[str, bool]:
    return dict.fromkeys(NOTIFICATION_KEYS, True)


@dataclass
class UserProfile:
    """Public-facing profile attached to one account."""

    user_id: UUID
    bio: str = ""
    avatar: str = ""
    social_links: dict[str, str] = field(default_factory=dict)
    skills: set[str] = field(default_factory=set)
    interests: set[str] = field(default_factory=set)
    location: str = ""
    website: str = ""
    badges: set[str] = field(default_factory=set)
    is_public: bool = True
    notification_settings: dict[str, bool] = field(
        default_factory=default_notification_settings
    )
    stats: ProfileStats = field(default_factory=ProfileStats)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def adjust_comments(self, delta: int) -> int:
        """Shift the cached comment counter, never below zero."""
        self.stats.comments_count = max(0, self.stats.comments_count + delta)
        return self.stats.comments_count

    def check_badges(self) -> set[str]:
        """Merge newly earned badges into ``badges``.

        Badges are never revoked, even when the stats drop below a threshold.

        Returns:
            The badges added by this call
        """
        new = award_badges(self.stats) - self.badges
        self.badges |= new
        return new

    @classmethod
    def from_row(cls, row: Any) -> "UserProfile":
        """Create UserProfile from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at) or utc_now()
        notifications = default_notification_settings()
        notifications.update(row.notification_settings or {})
        return cls(
            user_id=row.user_id,
            bio=row.bio or "",
            avatar=row.avatar or "",
            social_links=dict(row.social_links or {}),
            skills=set(row.skills or ()),
            interests=set(row.interests or ()),
            location=row.location or "",
            website=row.website or "",
            badges=set(row.badges or ()),
            is_public=row.is_public if row.is_public is not None else True,
            notification_settings=notifications,
            stats=ProfileStats(
                posts_count=row.posts_count or 0,
                comments_count=row.comments_count or 0,
                views_count=row.views_count or 0,
                likes_received=row.likes_received or 0,
            ),
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )

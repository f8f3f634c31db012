"""User profiles, stats aggregation and badges.

Note: Router is not exported here to avoid circular imports.
"""

from .models import PROFILES_TABLES_CQL, Badge, ProfileStats, UserProfile
from .service import ProfileNotFoundError, ProfileService


__all__ = [
    "PROFILES_TABLES_CQL",
    "Badge",
    "ProfileNotFoundError",
    "ProfileService",
    "ProfileStats",
    "UserProfile",
]

"""Database models for the newsletter subscriber registry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from blog.utils.timestamps import ensure_utc_aware, utc_now


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

SUBSCRIBER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.newsletter_subscribers (
    email TEXT PRIMARY KEY,
    subscribed_at TIMESTAMP
)
"""

NEWSLETTER_TABLES_CQL = [
    SUBSCRIBER_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Subscriber:
    email: str
    subscribed_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_row(cls, row: Any) -> "Subscriber":
        return cls(
            email=row.email,
            subscribed_at=ensure_utc_aware(row.subscribed_at) or utc_now(),
        )

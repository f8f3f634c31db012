"""Database models for the category taxonomy."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from blog.utils.text import generate_slug
from blog.utils.timestamps import ensure_utc_aware, utc_now


DEFAULT_CATEGORY_COLOR = "#3B82F6"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

CATEGORY_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.categories (
    category_id UUID PRIMARY KEY,
    name TEXT,
    slug TEXT,
    description TEXT,
    color TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

CATEGORY_SLUG_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS categories_slug_idx ON {keyspace}.categories (slug)
"""

CATEGORIES_TABLES_CQL = [
    CATEGORY_TABLE_CQL,
    CATEGORY_SLUG_INDEX_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Category:
    category_id: UUID
    name: str
    slug: str
    description: str
    color: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Category":
        """Create Category from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at) or utc_now()
        return cls(
            category_id=row.category_id,
            name=row.name,
            slug=row.slug,
            description=row.description or "",
            color=row.color or DEFAULT_CATEGORY_COLOR,
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )


def create_category(
    name: str,
    description: str = "",
    color: str | None = None,
) -> Category:
    now = utc_now()
    return Category(
        category_id=uuid4(),
        name=name,
        slug=generate_slug(name),
        description=description,
        color=color or DEFAULT_CATEGORY_COLOR,
        created_at=now,
        updated_at=now,
    )

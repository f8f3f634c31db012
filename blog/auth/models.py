"""Database models for accounts.

Accounts are stored in a single ``users`` table keyed by id, with secondary
indexes on username and email for login and profile lookups.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from blog.auth.permissions import UserRole
from blog.utils.timestamps import ensure_utc_aware, utc_now


USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users (
    id UUID PRIMARY KEY,
    username TEXT,
    email TEXT,
    password_hash TEXT,
    role TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

USER_USERNAME_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS users_username_idx ON {keyspace}.users (username)
"""

USER_EMAIL_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS users_email_idx ON {keyspace}.users (email)
"""

AUTH_TABLES_CQL = [
    USER_TABLE_CQL,
    USER_USERNAME_INDEX_CQL,
    USER_EMAIL_INDEX_CQL,
]


class User:
    """Account entity.

    Attributes:
        id: Opaque identifier referenced by posts, comments and profiles
        username: Unique public handle, denormalized onto posts and comments
        email: Unique login address, stored lowercased
        password_hash: Argon2id hash
        role: ``user`` or ``admin``
        created_at: Join date
    """

    def __init__(
        self,
        id: UUID | None = None,
        username: str = "",
        email: str = "",
        password_hash: str = "",
        role: str = UserRole.USER.value,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.username = username.strip()
        self.email = email.lower().strip()
        self.password_hash = password_hash
        self.role = role
        self.created_at = ensure_utc_aware(created_at) or utc_now()
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "User":
        """Create User instance from Cassandra row."""
        return cls(
            id=row.id,
            username=row.username or "",
            email=row.email or "",
            password_hash=row.password_hash or "",
            role=row.role or UserRole.USER.value,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def token_claims(self) -> dict[str, str]:
        return {
            "sub": str(self.id),
            "username": self.username,
            "email": self.email,
            "role": self.role,
        }

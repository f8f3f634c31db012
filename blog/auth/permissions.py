"""Roles and ownership checks.

The blog has two roles. Admins may edit or delete any post and manage
categories; everybody else may only touch what they authored.
"""

from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: "UserRole | str") -> "UserRole | None":
        """Role for ``value``, or None when a token carries a role we do not know."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


def has_permission(user_role: UserRole | str, required_role: UserRole | str) -> bool:
    """Whether ``user_role`` satisfies ``required_role``.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.USER)
        True
        >>> has_permission("user", "admin")
        False
    """
    role = UserRole.parse(user_role)
    required = UserRole.parse(required_role)
    if role is None or required is None:
        return False
    return role is UserRole.ADMIN or required is UserRole.USER


def is_admin(role: UserRole | str) -> bool:
    return UserRole.parse(role) is UserRole.ADMIN


def is_author_or_admin(
    author_id: UUID, requester_id: UUID, requester_role: UserRole | str
) -> bool:
    """Ownership rule for posts: the author, or any admin."""
    return author_id == requester_id or is_admin(requester_role)

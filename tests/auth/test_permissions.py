"""Tests for auth permissions."""

from uuid import uuid4

import pytest

from blog.auth.permissions import (
    UserRole,
    has_permission,
    is_admin,
    is_author_or_admin,
)


class TestUserRole:
    def test_role_values(self) -> None:
        assert UserRole.USER.value == "user"
        assert UserRole.ADMIN.value == "admin"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("user", UserRole.USER),
            ("admin", UserRole.ADMIN),
            (UserRole.ADMIN, UserRole.ADMIN),
            ("moderator", None),
            ("", None),
        ],
    )
    def test_parse(self, value: str, expected: UserRole | None) -> None:
        assert UserRole.parse(value) is expected


class TestHasPermission:
    def test_admin_has_all_permissions(self) -> None:
        assert has_permission(UserRole.ADMIN, UserRole.USER) is True
        assert has_permission(UserRole.ADMIN, UserRole.ADMIN) is True

    def test_user_permissions(self) -> None:
        assert has_permission(UserRole.USER, UserRole.USER) is True
        assert has_permission(UserRole.USER, UserRole.ADMIN) is False

    def test_string_roles(self) -> None:
        assert has_permission("admin", "user") is True
        assert has_permission("user", "admin") is False

    def test_unknown_role_has_no_permissions(self) -> None:
        """Roles from old tokens satisfy nothing, not even the base role."""
        assert has_permission("bogus", "admin") is False
        assert has_permission("bogus", "user") is False


class TestOwnership:
    def test_is_admin(self) -> None:
        assert is_admin("admin")
        assert is_admin(UserRole.ADMIN)
        assert not is_admin("user")
        assert not is_admin("bogus")

    def test_author_or_admin(self) -> None:
        author, other = uuid4(), uuid4()

        assert is_author_or_admin(author, author, "user")
        assert is_author_or_admin(author, other, "admin")
        assert not is_author_or_admin(author, other, "user")

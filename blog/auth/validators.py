"""Validation rules for account input."""

import re
from typing import NamedTuple


PASSWORD_MIN_LENGTH = 8
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")

# Checked in order; the first failing rule is reported
_PASSWORD_CHARACTER_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"\d"), "a digit"),
)


class ValidationResult(NamedTuple):
    valid: bool
    message: str | None = None


OK = ValidationResult(True)


def validate_password(password: str) -> ValidationResult:
    """At least 8 characters mixing upper case, lower case and digits.

    Examples:
        >>> validate_password("Abcdef12")
        ValidationResult(valid=True, message=None)
        >>> validate_password("abcdefg1").message
        'Password must contain an uppercase letter'
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(
            False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        )
    for pattern, requirement in _PASSWORD_CHARACTER_RULES:
        if not pattern.search(password):
            return ValidationResult(False, f"Password must contain {requirement}")
    return OK


def validate_username(username: str) -> ValidationResult:
    """Usernames are 3-30 characters of letters, digits and underscores."""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return ValidationResult(
            False,
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
        )
    if _USERNAME_RE.match(username) is None:
        return ValidationResult(
            False, "Username may only contain letters, digits and underscores"
        )
    return OK

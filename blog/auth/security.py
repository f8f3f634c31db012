"""Password hashing (Argon2id) and JWT access tokens.

Tokens are stateless: the claims carry everything the API needs to build the
requesting account (id, username, email, role), so no lookup happens per
request. There are no refresh tokens; clients log in again after expiry.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from blog.config.settings import get_settings


ACCESS_TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ("sub", "exp", "type")

_hasher = PasswordHasher(time_cost=2, memory_cost=19456, parallelism=1)


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> tuple[bool, str | None]:
    """Check ``password`` against a stored Argon2 hash.

    Returns ``(is_valid, new_hash)``; ``new_hash`` is only set when the stored
    hash used weaker parameters and the caller should persist the upgrade.
    """
    try:
        _hasher.verify(password_hash, password)
    except VerifyMismatchError:
        return False, None
    except VerificationError:
        # Corrupt or foreign hash format
        return False, None

    upgraded = hash_password(password) if _hasher.check_needs_rehash(password_hash) else None
    return True, upgraded


def create_access_token(
    claims: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(
        minutes=settings.auth_access_token_expire_minutes
    )
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises:
        JWTError: bad signature, expired, missing claims or not an access token
    """
    settings = get_settings()
    claims = jwt.decode(
        token,
        settings.auth_secret_key,
        algorithms=[settings.auth_algorithm],
    )

    missing = [name for name in REQUIRED_CLAIMS if name not in claims]
    if missing:
        msg = f"Token is missing claims: {', '.join(missing)}"
        raise JWTError(msg)
    if claims["type"] != ACCESS_TOKEN_TYPE:
        msg = f"Invalid token type: expected '{ACCESS_TOKEN_TYPE}'"
        raise JWTError(msg)
    return claims

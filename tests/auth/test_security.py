"""Tests for auth security functions."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import JWTError, jwt

from blog.auth.permissions import UserRole
from blog.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from blog.config.settings import get_settings


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_creates_hash(self) -> None:
        password = "SecureP@ssword123"
        hashed = hash_password(password)
        assert hashed != password
        assert hashed.startswith("$argon2id$")

    def test_hash_password_unique_hashes(self) -> None:
        """Same password should produce different hashes (due to salt)."""
        password = "SecureP@ssword123"
        assert hash_password(password) != hash_password(password)

    def test_verify_password_correct(self) -> None:
        password = "SecureP@ssword123"
        is_valid, new_hash = verify_password(password, hash_password(password))
        assert is_valid is True
        assert new_hash is None  # No rehash needed for fresh hash

    def test_verify_password_incorrect(self) -> None:
        hashed = hash_password("SecureP@ssword123")
        is_valid, new_hash = verify_password("WrongP@ssword456", hashed)
        assert is_valid is False
        assert new_hash is None

    def test_verify_password_empty(self) -> None:
        hashed = hash_password("SecureP@ssword123")
        is_valid, _new_hash = verify_password("", hashed)
        assert is_valid is False


class TestAccessToken:
    """Tests for access token creation and decoding."""

    def test_round_trip_claims(self) -> None:
        user_id = uuid4()
        token = create_access_token(
            {
                "sub": str(user_id),
                "username": "alice",
                "email": "alice@example.com",
                "role": UserRole.USER.value,
            }
        )

        payload = decode_access_token(token)

        assert payload["sub"] == str(user_id)
        assert payload["username"] == "alice"
        assert payload["role"] == "user"
        assert payload["type"] == "access"
        assert "exp" in payload
        assert "iat" in payload

    def test_expired_token_rejected(self) -> None:
        token = create_access_token(
            {"sub": str(uuid4())}, expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_foreign_signature_rejected(self) -> None:
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "access"},
            "not-the-server-secret",
            algorithm=get_settings().auth_algorithm,
        )
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_wrong_type_rejected(self) -> None:
        settings = get_settings()
        expires = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": expires, "type": "refresh"},
            settings.auth_secret_key,
            algorithm=settings.auth_algorithm,
        )
        with pytest.raises(JWTError, match="token type"):
            decode_access_token(token)

    def test_missing_subject_rejected(self) -> None:
        token = create_access_token({"username": "alice"})
        with pytest.raises(JWTError, match="sub"):
            decode_access_token(token)

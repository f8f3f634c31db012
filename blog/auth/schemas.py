"""Pydantic schemas for authentication."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from blog.auth.validators import validate_password, validate_username


if TYPE_CHECKING:
    from blog.auth.models import User


# ==============================================================================
# Request Schemas
# ==============================================================================


class RegisterRequest(BaseModel):
    """Account registration request."""

    username: str = Field(..., description="Public handle")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=8, description="Password")

    @field_validator("username")
    @classmethod
    def validate_username_format(cls, v: str) -> str:
        v = v.strip()
        result = validate_username(v)
        if not result.valid:
            raise ValueError(result.message or "Invalid username")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        result = validate_password(v)
        if not result.valid:
            raise ValueError(result.message or "Invalid password")
        return v


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


# ==============================================================================
# Response Schemas
# ==============================================================================


class UserResponse(BaseModel):
    """Account as seen by its owner or derived from a token."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: "User") -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
        )


class AuthorSummary(BaseModel):
    """Denormalized author reference embedded in posts and comments."""

    id: UUID
    username: str


class TokenResponse(BaseModel):
    """Access token response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Token expiration in seconds")
    user: UserResponse

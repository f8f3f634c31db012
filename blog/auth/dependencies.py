"""Authentication dependencies.

Requests authenticate with ``Authorization: Bearer <jwt>``. The account is
rebuilt from the token claims; no store lookup happens per request.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError

from blog.auth.permissions import UserRole, has_permission
from blog.auth.schemas import UserResponse
from blog.auth.security import decode_access_token
from blog.auth.service import AuthService
from blog.core.context import set_user_id
from blog.core.dependencies import from_app_state


get_auth_service = from_app_state("auth_service", "Auth")


def bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _account_from_claims(claims: dict) -> UserResponse:
    set_user_id(claims["sub"])
    return UserResponse(
        id=claims["sub"],
        username=claims.get("username", ""),
        email=claims.get("email", ""),
        role=claims.get("role", UserRole.USER.value),
    )


async def get_current_user(
    token: Annotated[str | None, Depends(bearer_token)],
) -> UserResponse:
    """Account behind the bearer token; 401 when missing, invalid or expired."""
    if token is None:
        raise _unauthorized("Access token required")
    try:
        claims = decode_access_token(token)
    except JWTError as e:
        raise _unauthorized("Invalid or expired token") from e
    return _account_from_claims(claims)


async def get_current_user_optional(
    token: Annotated[str | None, Depends(bearer_token)],
) -> UserResponse | None:
    """Like :func:`get_current_user`, but anonymous callers get None."""
    if token is None:
        return None
    try:
        return _account_from_claims(decode_access_token(token))
    except JWTError:
        return None


def require_role(required: UserRole):
    async def checker(
        user: Annotated[UserResponse, Depends(get_current_user)],
    ) -> UserResponse:
        if not has_permission(user.role, required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return checker


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CurrentUser = Annotated[UserResponse, Depends(get_current_user)]
OptionalUser = Annotated[UserResponse | None, Depends(get_current_user_optional)]
AdminUser = Annotated[UserResponse, Depends(require_role(UserRole.ADMIN))]

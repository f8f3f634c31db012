"""Authentication API endpoints."""

from fastapi import APIRouter, HTTPException, status

from blog.auth.dependencies import AuthServiceDep, CurrentUser
from blog.auth.schemas import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from blog.auth.service import UserExistsError
from blog.config.settings import get_settings
from blog.core.exceptions import BlogError, handle_blog_error


router = APIRouter(prefix="/v1/auth", tags=["auth"])


def _token_response(token: str, user: UserResponse) -> TokenResponse:
    settings = get_settings()
    return TokenResponse(
        access_token=token,
        expires_in=settings.auth_access_token_expire_minutes * 60,
        user=user,
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    responses={409: {"description": "Username or email already exists"}},
)
async def register(
    data: RegisterRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    """Create an account and sign it in."""
    try:
        user = await auth_service.register_user(data)
    except UserExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": e.message, "field": e.field},
        ) from e
    except BlogError as e:
        raise handle_blog_error(e) from e

    return _token_response(auth_service.create_token(user), UserResponse.from_user(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    try:
        user = await auth_service.authenticate_user(data.email, data.password)
    except BlogError as e:
        raise handle_blog_error(e) from e

    return _token_response(auth_service.create_token(user), UserResponse.from_user(user))


@router.get("/me", response_model=UserResponse, summary="Current account")
async def get_me(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """Return the stored account behind the bearer token."""
    try:
        user = await auth_service.get_user_by_id(current_user.id)
    except BlogError as e:
        raise handle_blog_error(e) from e

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse.from_user(user)

"""Category API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from blog.auth.dependencies import AdminUser
from blog.core.exceptions import BlogError, handle_blog_error

from .dependencies import CategoryServiceDep
from .schemas import CategoryCreateRequest, CategoryResponse, CategoryUpdateRequest


router = APIRouter(prefix="/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(service: CategoryServiceDep) -> list[CategoryResponse]:
    """List all categories sorted by name."""
    try:
        categories = await service.list_categories()
    except BlogError as e:
        raise handle_blog_error(e) from e
    return [CategoryResponse.from_category(c) for c in categories]


@router.get("/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, service: CategoryServiceDep) -> CategoryResponse:
    try:
        category = await service.get_by_slug(slug)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CategoryResponse.from_category(category)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    data: CategoryCreateRequest,
    service: CategoryServiceDep,
    _admin: AdminUser,
) -> CategoryResponse:
    try:
        category = await service.create_category(data)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CategoryResponse.from_category(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdateRequest,
    service: CategoryServiceDep,
    _admin: AdminUser,
) -> CategoryResponse:
    try:
        category = await service.update_category(category_id, data)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return CategoryResponse.from_category(category)


@router.delete("/{category_id}")
async def delete_category(
    category_id: UUID,
    service: CategoryServiceDep,
    _admin: AdminUser,
) -> dict[str, str]:
    try:
        await service.delete_category(category_id)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return {"message": "Category deleted successfully"}

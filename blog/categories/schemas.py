"""Pydantic schemas for categories."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import DEFAULT_CATEGORY_COLOR, Category


_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(default="", max_length=500)
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, pattern=_HEX_COLOR)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their value."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=_HEX_COLOR)


class CategorySummary(BaseModel):
    """Category reference embedded in post responses."""

    id: UUID
    name: str
    slug: str
    color: str

    @classmethod
    def from_category(cls, category: Category) -> "CategorySummary":
        return cls(
            id=category.category_id,
            name=category.name,
            slug=category.slug,
            color=category.color,
        )


class CategoryResponse(CategorySummary):
    description: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_category(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.category_id,
            name=category.name,
            slug=category.slug,
            color=category.color,
            description=category.description,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )

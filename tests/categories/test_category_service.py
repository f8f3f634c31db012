"""Tests for CategoryService."""

from uuid import uuid4

import pytest

from blog.categories.schemas import CategoryCreateRequest, CategoryUpdateRequest
from blog.categories.service import CategoryNotFoundError, CategoryService
from blog.core.exceptions import SlugConflictError, ValidationFailedError
from tests.factories import category_row


@pytest.fixture
def category_service(mock_session):
    return CategoryService(session=mock_session, keyspace="test_keyspace")


class TestCategoryService:
    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, category_service, route_rows):
        route_rows(
            {
                category_service._get_all_categories: [
                    category_row("travel"),
                    category_row("Art"),
                    category_row("Music"),
                ]
            }
        )

        categories = await category_service.list_categories()

        assert [c.name for c in categories] == ["Art", "Music", "travel"]

    @pytest.mark.asyncio
    async def test_create(self, category_service, executed):
        category = await category_service.create_category(
            CategoryCreateRequest(name="  Web Dev  ")
        )

        assert category.name == "Web Dev"
        assert category.slug == "web-dev"
        assert category.color == "#3B82F6"
        assert len(executed(category_service._insert_category)) == 1

    @pytest.mark.asyncio
    async def test_create_conflict(self, category_service, route_rows, executed):
        route_rows({category_service._get_category_by_slug: [category_row("Web Dev")]})

        with pytest.raises(SlugConflictError):
            await category_service.create_category(CategoryCreateRequest(name="web dev"))
        assert executed(category_service._insert_category) == []

    @pytest.mark.asyncio
    async def test_name_without_letters_rejected(self, category_service, executed):
        with pytest.raises(ValidationFailedError):
            await category_service.create_category(CategoryCreateRequest(name="***"))
        assert executed(category_service._insert_category) == []

    @pytest.mark.asyncio
    async def test_rename_without_letters_rejected(
        self, category_service, route_rows, executed
    ):
        row = category_row("Art")
        route_rows({category_service._get_category: [row]})

        with pytest.raises(ValidationFailedError):
            await category_service.update_category(
                row.category_id, CategoryUpdateRequest(name="---")
            )
        assert executed(category_service._update_category) == []

    def test_bad_color(self):
        with pytest.raises(ValueError):
            CategoryCreateRequest(name="Art", color="red")

    @pytest.mark.asyncio
    async def test_rename_same_category_allowed(self, category_service, route_rows):
        row = category_row("Art")
        route_rows(
            {
                category_service._get_category: [row],
                category_service._get_category_by_slug: [row],
            }
        )

        category = await category_service.update_category(
            row.category_id, CategoryUpdateRequest(name="ART")
        )

        assert category.slug == "art"

    @pytest.mark.asyncio
    async def test_update_missing(self, category_service):
        with pytest.raises(CategoryNotFoundError):
            await category_service.update_category(
                uuid4(), CategoryUpdateRequest(description="x")
            )

    @pytest.mark.asyncio
    async def test_delete(self, category_service, route_rows, executed):
        row = category_row("Art")
        route_rows({category_service._get_category: [row]})

        await category_service.delete_category(row.category_id)

        assert executed(category_service._delete_category) == [[row.category_id]]

    @pytest.mark.asyncio
    async def test_get_categories_skips_missing(self, category_service, route_rows):
        row = category_row("Art")
        route_rows(
            {
                category_service._get_category: lambda params: (
                    [row] if params[0] == row.category_id else []
                )
            }
        )

        found = await category_service.get_categories({row.category_id, uuid4()})

        assert list(found) == [row.category_id]

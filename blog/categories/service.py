"""Category service.

Categories are a small, flat taxonomy. Names and slugs are unique; the slug is
derived from the name and a collision is rejected rather than disambiguated.
Deleting a category does not touch the posts referencing it.
"""

from uuid import UUID

from blog.core.exceptions import NotFoundError, SlugConflictError, ValidationFailedError
from blog.core.logging import get_logger
from blog.core.service import CassandraService
from blog.utils.text import generate_slug
from blog.utils.timestamps import utc_now

from .models import Category, create_category
from .schemas import CategoryCreateRequest, CategoryUpdateRequest


logger = get_logger(__name__)


class CategoryNotFoundError(NotFoundError):
    def __init__(self, message: str = "Category not found"):
        super().__init__(message)


class CategoryService(CassandraService):
    """CRUD over the ``categories`` table."""

    def _prepare_statements(self) -> None:
        self._get_category = self._prepare(
            "SELECT * FROM {keyspace}.categories WHERE category_id = ?"
        )
        self._get_category_by_slug = self._prepare(
            "SELECT * FROM {keyspace}.categories WHERE slug = ?"
        )
        self._get_all_categories = self._prepare("SELECT * FROM {keyspace}.categories")
        self._insert_category = self._prepare("""
            INSERT INTO {keyspace}.categories
            (category_id, name, slug, description, color, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)
        self._update_category = self._prepare("""
            UPDATE {keyspace}.categories
            SET name = ?, slug = ?, description = ?, color = ?, updated_at = ?
            WHERE category_id = ?
        """)
        self._delete_category = self._prepare(
            "DELETE FROM {keyspace}.categories WHERE category_id = ?"
        )

    # ==========================================================================
    # Queries
    # ==========================================================================

    async def list_categories(self) -> list[Category]:
        """All categories sorted by name."""
        rows = await self._execute(self._get_all_categories)
        return sorted(
            (Category.from_row(row) for row in rows),
            key=lambda c: c.name.lower(),
        )

    async def get_category(self, category_id: UUID) -> Category | None:
        row = await self._fetch_one(self._get_category, [category_id])
        return Category.from_row(row) if row else None

    async def find_by_slug(self, slug: str) -> Category | None:
        row = await self._fetch_one(self._get_category_by_slug, [slug])
        return Category.from_row(row) if row else None

    async def get_by_slug(self, slug: str) -> Category:
        category = await self.find_by_slug(slug)
        if category is None:
            raise CategoryNotFoundError()
        return category

    async def get_categories(self, category_ids: set[UUID]) -> dict[UUID, Category]:
        """Resolve several references; missing ids are simply absent."""
        found: dict[UUID, Category] = {}
        for category_id in category_ids:
            category = await self.get_category(category_id)
            if category is not None:
                found[category_id] = category
        return found

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def _ensure_slug_free(self, slug: str, category_id: UUID | None = None) -> None:
        if not slug:
            raise ValidationFailedError("Category name must contain letters or digits")
        existing = await self.find_by_slug(slug)
        if existing is not None and existing.category_id != category_id:
            raise SlugConflictError("Category already exists")

    async def create_category(self, data: CategoryCreateRequest) -> Category:
        """Create a category.

        Raises:
            ValidationFailedError: If the name yields an empty slug
            SlugConflictError: If another category derives the same slug
        """
        category = create_category(data.name, data.description, data.color)
        await self._ensure_slug_free(category.slug)

        await self._execute(
            self._insert_category,
            [
                category.category_id,
                category.name,
                category.slug,
                category.description,
                category.color,
                category.created_at,
                category.updated_at,
            ],
        )
        logger.info(
            "category_created",
            category_id=str(category.category_id),
            slug=category.slug,
        )
        return category

    async def update_category(
        self, category_id: UUID, data: CategoryUpdateRequest
    ) -> Category:
        """Apply a partial update; a rename re-derives the slug."""
        category = await self.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError()

        if data.name is not None and data.name.strip() != category.name:
            category.name = data.name.strip()
            category.slug = generate_slug(category.name)
            await self._ensure_slug_free(category.slug, category.category_id)
        if data.description is not None:
            category.description = data.description
        if data.color is not None:
            category.color = data.color
        category.updated_at = utc_now()

        await self._execute(
            self._update_category,
            [
                category.name,
                category.slug,
                category.description,
                category.color,
                category.updated_at,
                category.category_id,
            ],
        )
        logger.info("category_updated", category_id=str(category_id))
        return category

    async def delete_category(self, category_id: UUID) -> None:
        """Delete a category. Posts keep their now dangling reference."""
        if await self.get_category(category_id) is None:
            raise CategoryNotFoundError()

        await self._execute(self._delete_category, [category_id])
        logger.info("category_deleted", category_id=str(category_id))

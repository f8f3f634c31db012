"""FastAPI dependencies for categories."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import CategoryService


get_category_service = from_app_state("category_service", "Category")

CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]

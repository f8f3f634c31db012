"""FastAPI dependencies for search."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import SearchService


get_search_service = from_app_state("search_service", "Search")

SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]

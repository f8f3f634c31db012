"""FastAPI dependencies for the sitemap."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import SitemapService


get_sitemap_service = from_app_state("sitemap_service", "Sitemap")

SitemapServiceDep = Annotated[SitemapService, Depends(get_sitemap_service)]

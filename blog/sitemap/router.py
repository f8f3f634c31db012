"""Sitemap and robots.txt endpoints, served from the site root."""

from fastapi import APIRouter, Request, Response

from blog.core.exceptions import BlogError, handle_blog_error

from .dependencies import SitemapServiceDep


router = APIRouter(tags=["sitemap"])


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(service: SitemapServiceDep) -> Response:
    try:
        body = await service.build_sitemap()
    except BlogError as e:
        raise handle_blog_error(e) from e
    return Response(content=body, media_type="application/xml")


@router.get("/robots.txt", response_class=Response)
async def robots(request: Request, service: SitemapServiceDep) -> Response:
    body = service.build_robots(str(request.url_for("sitemap")))
    return Response(content=body, media_type="text/plain")

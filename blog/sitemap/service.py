"""Sitemap and robots.txt generation.

URLs point at the public site (``site_base_url``), not at the API.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from blog.core.logging import get_logger
from blog.utils.timestamps import utc_now


if TYPE_CHECKING:
    from blog.categories.service import CategoryService
    from blog.posts.service import PostService


logger = get_logger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# (path, changefreq, priority)
STATIC_PAGES = [
    ("/", "daily", "1.0"),
    ("/login", "monthly", "0.5"),
    ("/register", "monthly", "0.5"),
]

ROBOTS_DISALLOW = ["/v1/", "/profile/", "/create/", "/edit/"]


class SitemapService:
    def __init__(
        self,
        post_service: "PostService",
        category_service: "CategoryService",
        base_url: str,
    ):
        self.post_service = post_service
        self.category_service = category_service
        self.base_url = base_url.rstrip("/")

    def _add_url(
        self,
        urlset: ET.Element,
        path: str,
        lastmod: datetime,
        changefreq: str,
        priority: str,
    ) -> None:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = f"{self.base_url}{path}"
        ET.SubElement(url, "lastmod").text = lastmod.isoformat()
        ET.SubElement(url, "changefreq").text = changefreq
        ET.SubElement(url, "priority").text = priority

    async def build_sitemap(self) -> str:
        """Static pages, then one URL per category and per published post."""
        now = utc_now()
        urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

        for path, changefreq, priority in STATIC_PAGES:
            self._add_url(urlset, path, now, changefreq, priority)

        categories = await self.category_service.list_categories()
        for category in categories:
            self._add_url(
                urlset, f"/category/{category.slug}", category.updated_at, "weekly", "0.8"
            )

        posts = await self.post_service.list_published()
        for post in posts:
            self._add_url(urlset, f"/post/{post.slug}", post.updated_at, "weekly", "0.9")

        logger.debug("sitemap_built", categories=len(categories), posts=len(posts))
        body = ET.tostring(urlset, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'

    def build_robots(self, sitemap_url: str) -> str:
        lines = ["User-agent: *", "Allow: /"]
        lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
        lines += ["", f"Sitemap: {sitemap_url}", "", "Crawl-delay: 1"]
        return "\n".join(lines) + "\n"

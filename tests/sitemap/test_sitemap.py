"""Tests for sitemap.xml and robots.txt."""

from unittest.mock import AsyncMock
from xml.etree import ElementTree as ET

import pytest

from blog.categories.models import Category
from blog.posts.models import Post
from blog.sitemap.service import SITEMAP_NS, SitemapService
from tests.factories import category_row, post_row, ts


NS = {"sm": SITEMAP_NS}


@pytest.fixture
def sitemap_service(app):
    post_service = AsyncMock()
    post_service.list_published = AsyncMock(
        return_value=[Post.from_row(post_row("Hello World", updated_at=ts(4)))]
    )
    category_service = AsyncMock()
    category_service.list_categories = AsyncMock(
        return_value=[Category.from_row(category_row("Tech"))]
    )
    service = SitemapService(
        post_service=post_service,
        category_service=category_service,
        base_url="https://blog.example.com/",
    )
    app.state.sitemap_service = service
    return service


class TestSitemapService:
    @pytest.mark.asyncio
    async def test_urls(self, sitemap_service):
        body = await sitemap_service.build_sitemap()

        assert body.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = ET.fromstring(body.split("\n", 1)[1])
        entries = {
            url.findtext("sm:loc", namespaces=NS): (
                url.findtext("sm:changefreq", namespaces=NS),
                url.findtext("sm:priority", namespaces=NS),
            )
            for url in root.findall("sm:url", NS)
        }
        assert entries == {
            "https://blog.example.com/": ("daily", "1.0"),
            "https://blog.example.com/login": ("monthly", "0.5"),
            "https://blog.example.com/register": ("monthly", "0.5"),
            "https://blog.example.com/category/tech": ("weekly", "0.8"),
            "https://blog.example.com/post/hello-world": ("weekly", "0.9"),
        }

    @pytest.mark.asyncio
    async def test_post_lastmod(self, sitemap_service):
        body = await sitemap_service.build_sitemap()

        assert f"<lastmod>{ts(4).isoformat()}</lastmod>" in body

    def test_robots(self, sitemap_service):
        robots = sitemap_service.build_robots("https://api.example.com/sitemap.xml")

        assert "Disallow: /v1/" in robots
        assert "Disallow: /edit/" in robots
        assert "Sitemap: https://api.example.com/sitemap.xml" in robots
        assert robots.endswith("Crawl-delay: 1\n")


class TestSitemapEndpoints:
    def test_sitemap_xml(self, client, sitemap_service):
        response = client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "/post/hello-world" in response.text

    def test_robots_txt(self, client, sitemap_service):
        response = client.get("/robots.txt")

        assert response.status_code == 200
        assert "Sitemap: http://testserver/sitemap.xml" in response.text

    def test_unavailable(self, client):
        assert client.get("/sitemap.xml").status_code == 503

"""Sitemap and robots.txt generation."""

from .service import SitemapService


__all__ = ["SitemapService"]

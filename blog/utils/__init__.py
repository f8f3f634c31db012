"""Utility modules for the blog API."""

from blog.utils.text import (
    generate_slug,
    matches_any,
    sanitize_html,
    search_pattern,
)
from blog.utils.timestamps import ensure_utc_aware, in_range, utc_now


__all__ = [
    "ensure_utc_aware",
    "generate_slug",
    "in_range",
    "matches_any",
    "sanitize_html",
    "search_pattern",
    "utc_now",
]

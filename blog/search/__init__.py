"""Search and autocomplete across posts, users, comments and categories."""

from .service import SearchResults, SearchService, Suggestion


__all__ = ["SearchResults", "SearchService", "Suggestion"]

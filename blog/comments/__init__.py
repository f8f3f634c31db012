"""Comment system module.

Provides threaded comments on posts with:
- One level of replies under top-level comments
- Likes and report-based auto-hiding
- Soft deletion that keeps reply threads intact
- Per-author rate limiting

Note: Router is not exported here to avoid circular imports.
Import directly from blog.comments.router when needed.
"""

from .models import (
    COMMENTS_TABLES_CQL,
    DELETED_PLACEHOLDER,
    ActiveBody,
    Comment,
    DeletedBody,
    create_comment,
)
from .service import CommentNotFoundError, CommentService


__all__ = [
    "COMMENTS_TABLES_CQL",
    "DELETED_PLACEHOLDER",
    "ActiveBody",
    "Comment",
    "CommentNotFoundError",
    "CommentService",
    "DeletedBody",
    "create_comment",
]

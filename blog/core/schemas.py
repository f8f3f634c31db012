"""Response models shared across modules."""

from pydantic import BaseModel

from blog.utils.pagination import total_pages


class MessageResponse(BaseModel):
    message: str


class PaginationInfo(BaseModel):
    """Offset pagination metadata."""

    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        pages = total_pages(total, limit)
        return cls(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        )

"""Offset pagination helpers."""

import math
from collections.abc import Sequence
from typing import TypeVar


T = TypeVar("T")


def page_offset(page: int, limit: int) -> int:
    """Number of items skipped before ``page`` (1-based)."""
    return (max(page, 1) - 1) * limit


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    skip = page_offset(page, limit)
    return list(items[skip : skip + limit])


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0

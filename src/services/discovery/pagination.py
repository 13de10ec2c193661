"""Page slicing for sorted catalog listings."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_items: int = 0


def total_pages(count: int, page_size: int) -> int:
    """Number of pages for ``count`` items; an empty listing still has one."""
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def paginate(items: Sequence[T], page_size: int, current_page: int) -> Page[T]:
    """Slice ``items`` into the requested page after clamping it into range."""
    pages = total_pages(len(items), page_size)
    page = clamp_page(current_page, pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=page,
        total_pages=pages,
        total_items=len(items),
    )

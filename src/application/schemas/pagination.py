"""Pagination helpers shared by the customer and bill listings.

``PaginationParams`` normalises a requested page into an offset/limit pair
for the repositories; ``PaginatedResponse`` carries one page of results
back to the caller together with the total count.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100


@dataclass(frozen=True)
class PaginationParams:
    """Requested page, 1-based, with ``size`` clamped to [1, MAX_PAGE_SIZE]."""

    page: int = 1
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(self, "size", max(1, min(self.size, MAX_PAGE_SIZE)))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


@dataclass
class PaginatedResponse(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    size: int = DEFAULT_PAGE_SIZE

    @property
    def pages(self) -> int:
        """Number of pages; an empty listing still has one (empty) page."""
        return max(1, math.ceil(self.total / self.size))

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

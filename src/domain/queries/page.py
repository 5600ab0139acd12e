"""Paged query results."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of an ordered result set."""

    items: list[T] = field(default_factory=list)
    page: int = 0
    size: int = 20
    has_next: bool = False

    @classmethod
    def from_window(cls, rows: list[T], page: int, size: int) -> "Page[T]":
        """Build a page from ``size + 1`` fetched rows; the extra row signals a next page."""
        return cls(items=rows[:size], page=page, size=size, has_next=len(rows) > size)

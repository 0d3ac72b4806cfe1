"""
Shared Pydantic schemas: pagination envelope and HH:MM validation.
"""
from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from tablebook.core.time_of_day import normalize_hhmm

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a listing."""
    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, page: int, limit: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=ceil(total / limit) if limit else 0,
        )


class MessageResponse(BaseModel):
    message: str


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """Field validator body: normalize "H:MM" to "HH:MM", pass None through."""
    if value is None:
        return None
    return normalize_hhmm(value)

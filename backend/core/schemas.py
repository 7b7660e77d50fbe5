# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Pydantic building blocks shared by every router.

The wire format is camelCase (``accessToken``, ``isActive`` …) while Python
code uses snake_case; ``CamelModel`` accepts both on input and emits
camelCase on output (FastAPI serialises response models by alias).
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel, Generic[T]):
    """``{"success": true, "message": ..., "data": ...}``"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))


class Page(CamelModel, Generic[T]):
    """``{"items": [...], "pagination": {...}}`` – the data part of list endpoints."""

    items: List[T]
    pagination: Pagination

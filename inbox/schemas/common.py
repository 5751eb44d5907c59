"""Response envelopes shared by every endpoint."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ActionResponse(BaseModel):
    """Envelope for operations that return no data."""

    success: bool = True
    message: str


class Pagination(BaseModel):
    """Page metadata for list endpoints."""

    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope for paginated lists."""

    success: bool = True
    data: list[T]
    pagination: Pagination

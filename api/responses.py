"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pager(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    page: int
    limit: int


class ApiResponse(BaseModel, Generic[T]):
    """Wire envelope: {status, message, data, pager}."""

    status: int
    message: str
    data: T | None = None
    pager: Pager | None = None


def envelope(
    data: Any = None,
    *,
    message: str = "Success",
    status_code: int = 200,
    pager: Pager | None = None,
) -> ApiResponse:
    """Wrap a payload in the standard response envelope."""
    return ApiResponse(status=status_code, message=message, data=data, pager=pager)


def paged(rows: list, *, total: int, page: int, limit: int, message: str) -> ApiResponse:
    """Envelope for a page of list results."""
    return envelope(rows, message=message, pager=Pager(total=total, page=page, limit=limit))

"""
Response envelope schemas

Every endpoint answers {success, message, code, data?, errors?}; paginated
lists carry {meta: {page, limit, total_rows}, rows} in data.
"""
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope"""
    success: bool = True
    message: str
    code: int = 200
    data: Optional[T] = None
    errors: Optional[Any] = None


class PageMeta(BaseModel):
    page: int
    limit: int
    total_rows: int


class Page(BaseModel, Generic[T]):
    meta: PageMeta
    rows: List[T] = Field(default_factory=list)


def ok(message: str, data: Any = None, code: int = 200) -> dict:
    """Success envelope; validated against the route's response_model."""
    return {"success": True, "message": message, "code": code, "data": data}


def paginated(message: str, page: int, limit: int, total: int, rows: List[Any]) -> dict:
    return ok(
        message,
        {
            "meta": {"page": page, "limit": limit, "total_rows": total},
            "rows": rows,
        },
    )

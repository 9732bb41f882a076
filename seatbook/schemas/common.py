from typing import List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper: used by all list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, data: List[T], total: int, page: int, limit: int):
        total_pages = -(-total // limit) if total else 0
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )


# Error responses
class ErrorResponse(BaseModel):
    detail: str

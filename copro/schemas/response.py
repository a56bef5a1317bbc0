import math
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """모든 API 응답을 감싸는 공통 형식 (상태 코드, 메시지, 데이터)"""

    status_code: int = 200
    message: str
    data: T | None = None


class PageInfo(BaseModel):
    current_page: int
    page_size: int
    total_pages: int
    total_items: int

    @classmethod
    def of(cls, page: int, size: int, total_items: int) -> "PageInfo":
        return cls(
            current_page=page,
            page_size=size,
            total_pages=math.ceil(total_items / size) if size else 0,
            total_items=total_items,
        )

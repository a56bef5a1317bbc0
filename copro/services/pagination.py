from fastapi import Query
from pydantic import BaseModel, Field

from copro.config.config import settings


class PageRequest(BaseModel):
    """1부터 시작하는 페이지 번호 기반 요청"""

    page: int = Field(default=1, ge=1)
    size: int = Field(default=settings.board.default_page_size, ge=1, le=100)
    standard: str = "createAt"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def get_page_request(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=settings.board.default_page_size, ge=1, le=100),
    standard: str = Query(default="createAt"),
) -> PageRequest:
    """
    `page_request: PageRequest = Depends(get_page_request)`로 사용
    """
    return PageRequest(page=page, size=size, standard=standard)

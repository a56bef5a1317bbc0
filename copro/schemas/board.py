from datetime import datetime

from pydantic import BaseModel, Field

from copro.models.board import Board, Category
from copro.models.image import Image
from copro.schemas.response import PageInfo


class BoardSaveRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    category: Category
    contents: str = Field(min_length=1)
    part: str | None = None
    tag: str | None = None
    image_ids: list[int] = Field(default_factory=list)


class BoardIdRequest(BaseModel):
    """스크랩/좋아요 등록·삭제 요청"""

    board_id: int


class ImageResponse(BaseModel):
    image_id: int
    url: str
    board_id: int | None

    @classmethod
    def of(cls, image: Image) -> "ImageResponse":
        return cls(image_id=image.id, url=image.url, board_id=image.board_id)


class BoardSummary(BaseModel):
    board_id: int
    category: Category
    title: str
    part: str | None
    tag: str | None
    nickname: str | None
    view_count: int
    heart_count: int
    comment_count: int
    created_at: datetime | None

    @classmethod
    def of(cls, board: Board, comment_count: int) -> "BoardSummary":
        return cls(
            board_id=board.id,
            category=board.category,
            title=board.title,
            part=board.part,
            tag=board.tag,
            nickname=board.owner.name if board.owner else None,
            view_count=board.view_count,
            heart_count=board.heart_count,
            comment_count=comment_count,
            created_at=board.created_at,
        )


class BoardListResponse(BaseModel):
    boards: list[BoardSummary]
    page_info: PageInfo


class BoardResponse(BaseModel):
    board_id: int
    category: Category
    title: str
    contents: str
    part: str | None
    tag: str | None
    member_id: int
    nickname: str | None
    occupation: str | None
    view_count: int
    heart_count: int
    created_at: datetime | None
    images: list[ImageResponse]
    is_heart: bool = False
    is_scrap: bool = False
    comment_count: int = 0

    @classmethod
    def of(
        cls,
        board: Board,
        is_heart: bool = False,
        is_scrap: bool = False,
        comment_count: int = 0,
    ) -> "BoardResponse":
        owner = board.owner
        return cls(
            board_id=board.id,
            category=board.category,
            title=board.title,
            contents=board.contents,
            part=board.part,
            tag=board.tag,
            member_id=board.member_id,
            nickname=owner.name if owner else None,
            occupation=owner.occupation if owner else None,
            view_count=board.view_count,
            heart_count=board.heart_count,
            created_at=board.created_at,
            images=[ImageResponse.of(image) for image in board.images],
            is_heart=is_heart,
            is_scrap=is_scrap,
            comment_count=comment_count,
        )


class HeartResponse(BaseModel):
    board_id: int
    heart_count: int

from sqlalchemy import Column, Integer, String

from copro.dependencies.mysql import Base
from copro.models.mixin import BaseMixin


class Image(Base, BaseMixin):
    __tablename__ = "image"

    url = Column(String(500), nullable=False, comment="이미지 조회 URL")
    storage_key = Column(String(255), nullable=False, comment="S3 object key")
    board_id = Column(
        Integer,
        nullable=True,
        index=True,
        comment="매핑된 게시물 board.id (NULL이면 아직 매핑되지 않음)",
    )

    @property
    def is_mapped(self) -> bool:
        return self.board_id is not None

from enum import StrEnum

from sqlalchemy import Column, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from copro.dependencies.mysql import Base
from copro.models.image import Image
from copro.models.member import Member
from copro.models.mixin import BaseMixin


class Category(StrEnum):
    PROJECT = "PROJECT"
    FREE = "FREE"
    NOTICE = "NOTICE"


class Board(Base, BaseMixin):
    __tablename__ = "board"

    title = Column(String(100), nullable=False, comment="게시물 제목")
    category = Column(Enum(Category), nullable=False, index=True, comment="카테고리")
    contents = Column(Text, nullable=False, comment="게시물 내용")
    part = Column(String(50), nullable=True, comment="모집 파트(ex - 백엔드)")
    tag = Column(String(100), nullable=True, comment="태그")
    member_id = Column(Integer, nullable=False, comment="작성자 member.id", index=True)
    view_count = Column(Integer, nullable=False, default=0, comment="조회 수")
    heart_count = Column(Integer, nullable=False, default=0, comment="좋아요 수")

    owner = relationship(
        Member,
        primaryjoin="Board.member_id == Member.id",
        foreign_keys="Board.member_id",
        lazy="joined",
    )
    # 게시물이 삭제되면 이미지의 board_id는 NULL로 풀려 다시 매핑할 수 있습니다.
    images = relationship(
        Image,
        primaryjoin="Board.id == Image.board_id",
        foreign_keys="Image.board_id",
        order_by="Image.id",
        lazy="selectin",
    )

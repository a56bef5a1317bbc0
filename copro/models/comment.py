from sqlalchemy import Column, Integer, Text

from copro.dependencies.mysql import Base
from copro.models.mixin import BaseMixin


class Comment(Base, BaseMixin):
    __tablename__ = "comment"

    content = Column(Text, nullable=False, comment="댓글 내용")
    member_id = Column(Integer, nullable=False, comment="작성자 member.id", index=True)
    board_id = Column(Integer, nullable=False, comment="게시물 board.id", index=True)

from sqlalchemy import Column, Integer, UniqueConstraint

from copro.dependencies.mysql import Base
from copro.models.mixin import BaseMixin


class MemberScrapBoard(Base, BaseMixin):
    """
    회원-게시물 스크랩 관계. 좋아요와 독립적으로 관리됩니다.
    """

    __tablename__ = "member_scrap_board"
    __table_args__ = (
        UniqueConstraint("member_id", "board_id", name="uq_member_scrap_board"),
    )

    member_id = Column(Integer, nullable=False, comment="회원 member.id", index=True)
    board_id = Column(Integer, nullable=False, comment="게시물 board.id", index=True)

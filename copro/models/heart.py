from sqlalchemy import Column, Integer, UniqueConstraint

from copro.dependencies.mysql import Base
from copro.models.mixin import BaseMixin


class MemberHeartBoard(Base, BaseMixin):
    """
    회원-게시물 좋아요 관계. 한 회원은 한 게시물에 한 번만 좋아요를 누를 수 있습니다.
    """

    __tablename__ = "member_heart_board"
    __table_args__ = (
        UniqueConstraint("member_id", "board_id", name="uq_member_heart_board"),
    )

    member_id = Column(Integer, nullable=False, comment="회원 member.id", index=True)
    board_id = Column(Integer, nullable=False, comment="게시물 board.id", index=True)

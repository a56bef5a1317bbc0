from sqlalchemy import Column, Integer, String

from copro.dependencies.mysql import Base
from copro.models.mixin import BaseMixin


class Member(Base, BaseMixin):
    __tablename__ = "member"

    name = Column(String(50), nullable=False, comment="닉네임")
    email = Column(String(100), unique=True, nullable=False, comment="이메일")
    occupation = Column(String(50), nullable=True, comment="직군(ex - 백엔드)")
    language = Column(
        String(255),
        nullable=True,
        comment="사용 언어 목록. 콤마로 구분(ex - Python,Java)",
    )
    career = Column(Integer, nullable=False, default=0, comment="경력(년)")

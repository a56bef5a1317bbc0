from pydantic import BaseModel

from copro.models.member import Member
from copro.schemas.response import PageInfo


class MemberResponse(BaseModel):
    member_id: int
    name: str
    occupation: str | None
    language: str | None
    career: int

    @classmethod
    def of(cls, member: Member) -> "MemberResponse":
        return cls(
            member_id=member.id,
            name=member.name,
            occupation=member.occupation,
            language=member.language,
            career=member.career,
        )


class MemberListResponse(BaseModel):
    members: list[MemberResponse]
    page_info: PageInfo

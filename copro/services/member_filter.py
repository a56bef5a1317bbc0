"""
회원 필터 조건.

각 조건은 SQLAlchemy 조건식 또는 None(조건 없음)을 반환하고,
`member_filter_criteria`가 None이 아닌 조건만 모아 AND로 결합합니다.
"""

import logging

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from copro.models.member import Member
from copro.schemas.member import MemberListResponse, MemberResponse
from copro.schemas.response import PageInfo
from copro.services.pagination import PageRequest

logger = logging.getLogger(__name__)


def has_occupation(occupation: str | None):
    if not occupation:
        return None
    return Member.occupation == occupation


def has_language(language: str | None):
    """쉼표로 이어진 language 컬럼에 해당 언어가 하나의 원소로 들어있는지 확인합니다."""
    if not language:
        return None
    return or_(
        Member.language == language,
        Member.language.startswith(f"{language},", autoescape=True),
        Member.language.contains(f",{language},", autoescape=True),
        Member.language.endswith(f",{language}", autoescape=True),
    )


def has_career(career: int | None):
    if career is None or career < 1:
        return None
    return Member.career == career


def not_current_member(member: Member):
    return Member.id != member.id


def member_filter_criteria(
    member: Member,
    occupation: str | None = None,
    language: str | None = None,
    career: int | None = None,
) -> list:
    criteria = [
        has_occupation(occupation),
        has_language(language),
        has_career(career),
        not_current_member(member),
    ]
    return [criterion for criterion in criteria if criterion is not None]


async def find_members(
    session: AsyncSession,
    member: Member,
    occupation: str | None,
    language: str | None,
    career: int | None,
    page_request: PageRequest,
) -> MemberListResponse:
    condition = and_(*member_filter_criteria(member, occupation, language, career))

    total = await session.scalar(
        select(func.count()).select_from(Member).where(condition)
    )
    result = await session.scalars(
        select(Member)
        .where(condition)
        .order_by(Member.id.desc())
        .offset(page_request.offset)
        .limit(page_request.size)
    )
    members = [MemberResponse.of(m) for m in result.all()]
    logger.debug(
        "회원 필터 조회: occupation=%s language=%s career=%s total=%s",
        occupation,
        language,
        career,
        total,
    )
    return MemberListResponse(
        members=members,
        page_info=PageInfo.of(page_request.page, page_request.size, total or 0),
    )

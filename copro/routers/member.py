from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from copro.dependencies.auth import get_current_member
from copro.dependencies.mysql import get_session
from copro.models.member import Member
from copro.schemas.member import MemberListResponse
from copro.schemas.response import ApiResponse
from copro.services import member_filter
from copro.services.pagination import PageRequest, get_page_request

router = APIRouter(prefix="/api/members", tags=["Member"])


@router.get("", response_model=ApiResponse[MemberListResponse])
async def find_members(
    occupation: str | None = Query(default=None),
    language: str | None = Query(default=None),
    career: int | None = Query(default=None),
    page_request: PageRequest = Depends(get_page_request),
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[MemberListResponse]:
    """직무, 언어, 경력 조건으로 다른 회원을 조회합니다. 본인은 제외됩니다."""
    members = await member_filter.find_members(
        session, current_member, occupation, language, career, page_request
    )
    return ApiResponse(
        message=f"{page_request.page}번 페이지 조회 완료", data=members
    )

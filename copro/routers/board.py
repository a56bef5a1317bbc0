import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from copro.dependencies.auth import get_current_member
from copro.dependencies.mysql import get_session
from copro.dependencies.valkey import get_client as get_valkey_client
from copro.models.board import Category
from copro.models.member import Member
from copro.schemas.board import (
    BoardIdRequest,
    BoardListResponse,
    BoardResponse,
    BoardSaveRequest,
    HeartResponse,
)
from copro.schemas.response import ApiResponse
from copro.services import board as board_service
from copro.services import board_query, ranking
from copro.services.pagination import PageRequest, get_page_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/board", tags=["Board"])


# ─── 조회 ─────────────────────────────────────────────────────────────────────


@router.get("/list/{category}", response_model=ApiResponse[BoardListResponse])
async def get_board_list(
    category: Category,
    page_request: PageRequest = Depends(get_page_request),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BoardListResponse]:
    """카테고리별 게시물 목록 (인증 불필요)"""
    boards = await board_query.find_all(session, category, page_request)
    return ApiResponse(message=f"{page_request.page}번 페이지 조회 완료", data=boards)


@router.get("/search", response_model=ApiResponse[BoardListResponse])
async def search_board(
    q: str = Query(...),
    page_request: PageRequest = Depends(get_page_request),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BoardListResponse]:
    """제목으로 게시물 검색 (인증 불필요)"""
    boards = await board_query.find_by_title_containing(session, q, page_request)
    return ApiResponse(message=f"{q} 조회 완료", data=boards)


@router.get("", response_model=ApiResponse[BoardResponse])
async def get_board(
    board_id: int = Query(..., alias="boardId"),
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BoardResponse]:
    """게시물 상세 조회. 조회 수가 1 증가합니다."""
    board = await board_query.get_board(session, current_member, board_id)
    return ApiResponse(message=f"{board_id}번 게시물 상세 조회 완료", data=board)


@router.get("/most-increased-hearts", response_model=ApiResponse[BoardResponse])
async def get_most_increased_hearts_board(
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
    valkey: aioredis.Redis = Depends(get_valkey_client),
) -> ApiResponse[BoardResponse]:
    """좋아요 증가량이 가장 큰 인기 게시물 조회"""
    board_id = await ranking.get_most_increased_hearts_board_id(valkey)
    board = await board_query.get_board(session, current_member, board_id)
    return ApiResponse(message=f"{board_id}번 인기 게시물 조회 완료", data=board)


# ─── 등록/수정/삭제 ───────────────────────────────────────────────────────────


@router.post("", response_model=ApiResponse[BoardResponse])
async def create_board(
    body: BoardSaveRequest,
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BoardResponse]:
    board = await board_service.create_board(session, body, current_member)
    return ApiResponse(
        message=f"{board.id}번 게시물 등록 완료", data=BoardResponse.of(board)
    )


@router.put("", response_model=ApiResponse[BoardResponse])
async def update_board(
    body: BoardSaveRequest,
    board_id: int = Query(..., alias="boardId"),
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BoardResponse]:
    """게시물 수정 (작성자 전용). image_ids의 이미지는 기존 이미지 뒤에 추가됩니다."""
    board = await board_service.update_board(session, board_id, body, current_member)
    comment_count = await board_query.count_comments(session, board.id)
    return ApiResponse(
        message=f"{board_id}번 게시물 수정 완료",
        data=BoardResponse.of(board, comment_count=comment_count),
    )


@router.delete("", response_model=ApiResponse[None])
async def delete_board(
    board_id: int = Query(..., alias="boardId"),
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    """게시물 삭제 (작성자 전용)"""
    await board_service.delete_board(session, board_id, current_member)
    return ApiResponse(message=f"{board_id}번 게시물 삭제 완료")


# ─── 스크랩 ───────────────────────────────────────────────────────────────────


@router.post("/scrap/save", response_model=ApiResponse[None])
async def scrap_board(
    body: BoardIdRequest,
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    await board_service.scrap_board(session, body.board_id, current_member)
    return ApiResponse(message=f"{body.board_id}번 게시물 스크랩 완료")


@router.delete("/scrap", response_model=ApiResponse[None])
async def scrap_delete(
    body: BoardIdRequest,
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    await board_service.scrap_delete(session, body.board_id, current_member)
    return ApiResponse(message=f"{body.board_id}번 게시물 스크랩 삭제 완료")


# ─── 좋아요 ───────────────────────────────────────────────────────────────────


@router.post("/heart/save", response_model=ApiResponse[HeartResponse])
async def heart_board(
    body: BoardIdRequest,
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[HeartResponse]:
    """좋아요 등록 후 게시물 작성자에게 알림을 발행합니다."""
    board = await board_service.heart_board(session, body.board_id, current_member)
    return ApiResponse(
        message=f"{body.board_id}번 게시물 좋아요 완료",
        data=HeartResponse(board_id=board.id, heart_count=board.heart_count),
    )


@router.delete("/heart", response_model=ApiResponse[HeartResponse])
async def heart_delete(
    body: BoardIdRequest,
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[HeartResponse]:
    board = await board_service.heart_delete(session, body.board_id, current_member)
    return ApiResponse(
        message=f"{body.board_id}번 게시물 좋아요 삭제 완료",
        data=HeartResponse(board_id=board.id, heart_count=board.heart_count),
    )

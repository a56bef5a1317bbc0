import logging

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from copro.exceptions import MemberNotFoundException
from copro.models.board import Board, Category
from copro.models.comment import Comment
from copro.models.heart import MemberHeartBoard
from copro.models.member import Member
from copro.models.scrap import MemberScrapBoard
from copro.schemas.board import BoardListResponse, BoardResponse, BoardSummary
from copro.schemas.response import PageInfo
from copro.services.board import get_board_or_raise
from copro.services.pagination import PageRequest

logger = logging.getLogger(__name__)

# 정렬 기준(standard) -> 정렬 컬럼. 알 수 없는 값은 작성일 기준으로 정렬합니다.
_SORT_COLUMNS = {
    "createAt": Board.created_at,
    "count": Board.view_count,
}


def _order_by(standard: str):
    column = _SORT_COLUMNS.get(standard.strip(), Board.created_at)
    return column.desc(), Board.id.desc()


def _comment_count_subquery():
    return (
        select(func.count(Comment.id))
        .where(Comment.board_id == Board.id)
        .correlate(Board)
        .scalar_subquery()
    )


async def _find_page(
    session: AsyncSession, condition, page_request: PageRequest
) -> BoardListResponse:
    total = await session.scalar(
        select(func.count()).select_from(Board).where(condition)
    )
    result = await session.execute(
        select(Board, _comment_count_subquery())
        .where(condition)
        .order_by(*_order_by(page_request.standard))
        .offset(page_request.offset)
        .limit(page_request.size)
    )
    boards = [
        BoardSummary.of(board, comment_count) for board, comment_count in result.all()
    ]
    return BoardListResponse(
        boards=boards,
        page_info=PageInfo.of(page_request.page, page_request.size, total or 0),
    )


async def find_all(
    session: AsyncSession, category: Category, page_request: PageRequest
) -> BoardListResponse:
    return await _find_page(session, Board.category == category, page_request)


async def find_by_title_containing(
    session: AsyncSession, query: str, page_request: PageRequest
) -> BoardListResponse:
    return await _find_page(
        session, Board.title.contains(query, autoescape=True), page_request
    )


async def count_comments(session: AsyncSession, board_id: int) -> int:
    return await session.scalar(
        select(func.count(Comment.id)).where(Comment.board_id == board_id)
    )


async def get_board(
    session: AsyncSession, member: Member, board_id: int
) -> BoardResponse:
    """게시물 상세 조회. 조회할 때마다 조회 수가 1 증가합니다."""
    viewer = await session.get(Member, member.id)
    if viewer is None:
        raise MemberNotFoundException(member.id)
    board = await get_board_or_raise(session, board_id)

    await session.execute(
        update(Board)
        .where(Board.id == board_id)
        .values(view_count=Board.view_count + 1)
    )
    await session.commit()
    await session.refresh(board)

    is_heart = await session.scalar(
        select(
            exists().where(
                MemberHeartBoard.member_id == viewer.id,
                MemberHeartBoard.board_id == board_id,
            )
        )
    )
    is_scrap = await session.scalar(
        select(
            exists().where(
                MemberScrapBoard.member_id == viewer.id,
                MemberScrapBoard.board_id == board_id,
            )
        )
    )
    comment_count = await count_comments(session, board_id)
    logger.debug("게시물 상세 조회: board_id=%s view_count=%s", board_id, board.view_count)

    return BoardResponse.of(
        board,
        is_heart=bool(is_heart),
        is_scrap=bool(is_scrap),
        comment_count=comment_count,
    )

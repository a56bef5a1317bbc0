"""
게시물 변경(등록/수정/삭제, 좋아요, 스크랩) 규칙을 담당합니다.

- 이미지는 하나의 게시물에만 매핑될 수 있고, 게시물당 최대 이미지 수를 넘을 수 없습니다.
- 게시물 수정/삭제는 작성자만 할 수 있습니다.
- 좋아요/스크랩은 회원당 게시물 하나에 한 번만 가능합니다.

모든 검증은 변경 전에 수행되므로, 예외가 발생하면 아무것도 commit되지 않습니다.
"""

import logging
from typing import Awaitable, Callable

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from copro.config.config import settings
from copro.exceptions import (
    AlreadyHeartException,
    AlreadyScrapException,
    BoardNotFoundException,
    HeartNotFoundException,
    ImageCountExceededException,
    MappedImageException,
    MemberNotFoundException,
    NotBoardOwnerException,
    ScrapNotFoundException,
)
from copro.models.board import Board
from copro.models.comment import Comment
from copro.models.heart import MemberHeartBoard
from copro.models.image import Image
from copro.models.member import Member
from copro.models.scrap import MemberScrapBoard
from copro.schemas.board import BoardSaveRequest
from copro.services.notification import send_heart_board_notification

logger = logging.getLogger(__name__)

HeartNotifier = Callable[[Board, Member], Awaitable[None]]


def is_board_owner(board: Board, member: Member) -> bool:
    return board.member_id == member.id


def ensure_board_owner(board: Board, member: Member) -> None:
    """게시물을 변경하기 전에 호출하는 권한 검사"""
    if not is_board_owner(board, member):
        logger.info(
            "작성자가 아닌 회원의 변경 요청: board_id=%s member_id=%s",
            board.id,
            member.id,
        )
        raise NotBoardOwnerException()


async def get_board_or_raise(session: AsyncSession, board_id: int) -> Board:
    board = await session.get(Board, board_id)
    if board is None:
        raise BoardNotFoundException(board_id)
    return board


async def _find_images(session: AsyncSession, image_ids: list[int]) -> list[Image]:
    """요청한 이미지 id 중 존재하는 이미지만 반환합니다 (중복 id는 하나로 취급)."""
    if not image_ids:
        return []
    result = await session.scalars(
        select(Image).where(Image.id.in_(set(image_ids))).order_by(Image.id)
    )
    return list(result.all())


def _check_for_already_mapped_images(images: list[Image]) -> None:
    for image in images:
        if image.is_mapped:
            raise MappedImageException(image.id)


def _check_total_image_count(mapped_count: int, new_images: list[Image]) -> None:
    max_images = settings.board.max_images
    if mapped_count + len(new_images) > max_images:
        raise ImageCountExceededException(max_images)


async def _attach_images(
    session: AsyncSession, board: Board, images: list[Image]
) -> None:
    """
    매핑되지 않은 이미지에만 board_id를 기록합니다.
    검사 이후 다른 요청이 먼저 매핑했다면 rollback 후 MappedImageException을 발생시킵니다.
    """
    if not images:
        return
    image_ids = [image.id for image in images]
    result = await session.execute(
        update(Image)
        .where(Image.id.in_(image_ids), Image.board_id.is_(None))
        .values(board_id=board.id)
    )
    if result.rowcount != len(image_ids):
        taken_id = await session.scalar(
            select(Image.id)
            .where(Image.id.in_(image_ids), Image.board_id != board.id)
            .order_by(Image.id)
        )
        await session.rollback()
        logger.warning("이미지 매핑 충돌: board_id=%s image_id=%s", board.id, taken_id)
        raise MappedImageException(taken_id or image_ids[0])

    max_images = settings.board.max_images
    mapped_count = await session.scalar(
        select(func.count(Image.id)).where(Image.board_id == board.id)
    )
    if mapped_count > max_images:
        await session.rollback()
        raise ImageCountExceededException(max_images)


async def create_board(
    session: AsyncSession, body: BoardSaveRequest, owner: Member
) -> Board:
    images = await _find_images(session, body.image_ids)
    _check_for_already_mapped_images(images)
    _check_total_image_count(0, images)

    board = Board(
        title=body.title,
        category=body.category,
        contents=body.contents,
        part=body.part,
        tag=body.tag,
        member_id=owner.id,
        view_count=0,
        heart_count=0,
    )
    session.add(board)
    await session.flush()
    await _attach_images(session, board, images)

    await session.commit()
    await session.refresh(board)
    logger.info(
        "게시물 등록: board_id=%s member_id=%s images=%d",
        board.id,
        owner.id,
        len(images),
    )
    return board


async def update_board(
    session: AsyncSession, board_id: int, body: BoardSaveRequest, member: Member
) -> Board:
    # 같은 게시물에 대한 동시 수정이 이미지 수 제한을 함께 통과하지 않도록 row lock
    board = await session.get(Board, board_id, with_for_update=True)
    if board is None:
        raise BoardNotFoundException(board_id)
    ensure_board_owner(board, member)

    images = await _find_images(session, body.image_ids)
    _check_for_already_mapped_images(images)
    _check_total_image_count(len(board.images), images)

    board.title = body.title
    board.category = body.category
    board.contents = body.contents
    board.part = body.part
    board.tag = body.tag
    await _attach_images(session, board, images)

    await session.commit()
    await session.refresh(board)
    return board


async def delete_board(session: AsyncSession, board_id: int, member: Member) -> None:
    board = await get_board_or_raise(session, board_id)
    ensure_board_owner(board, member)

    await session.execute(
        delete(MemberHeartBoard).where(MemberHeartBoard.board_id == board_id)
    )
    await session.execute(
        delete(MemberScrapBoard).where(MemberScrapBoard.board_id == board_id)
    )
    await session.execute(delete(Comment).where(Comment.board_id == board_id))
    # images 관계에 delete cascade가 없으므로 매핑된 이미지의 board_id는 NULL이 됩니다.
    await session.delete(board)
    await session.commit()
    logger.info("게시물 삭제: board_id=%s member_id=%s", board_id, member.id)


async def _get_member_or_raise(session: AsyncSession, member_id: int) -> Member:
    member = await session.get(Member, member_id)
    if member is None:
        raise MemberNotFoundException(member_id)
    return member


async def _heart_exists(session: AsyncSession, member_id: int, board_id: int) -> bool:
    return bool(
        await session.scalar(
            select(
                exists().where(
                    MemberHeartBoard.member_id == member_id,
                    MemberHeartBoard.board_id == board_id,
                )
            )
        )
    )


async def _scrap_exists(session: AsyncSession, member_id: int, board_id: int) -> bool:
    return bool(
        await session.scalar(
            select(
                exists().where(
                    MemberScrapBoard.member_id == member_id,
                    MemberScrapBoard.board_id == board_id,
                )
            )
        )
    )


async def _add_heart_count(session: AsyncSession, board_id: int, delta: int) -> None:
    await session.execute(
        update(Board)
        .where(Board.id == board_id)
        .values(heart_count=Board.heart_count + delta)
    )


async def heart_board(
    session: AsyncSession,
    board_id: int,
    member: Member,
    notify: HeartNotifier = send_heart_board_notification,
) -> Board:
    board = await get_board_or_raise(session, board_id)

    if await _heart_exists(session, member.id, board_id):
        raise AlreadyHeartException()

    try:
        session.add(MemberHeartBoard(member_id=member.id, board_id=board_id))
        await _add_heart_count(session, board_id, 1)
        await session.commit()
    except IntegrityError as e:
        # 존재 확인과 insert 사이에 같은 요청이 먼저 들어온 경우
        await session.rollback()
        raise AlreadyHeartException() from e
    await session.refresh(board)

    await notify(board, member)
    return board


async def heart_delete(session: AsyncSession, board_id: int, member: Member) -> Board:
    heart = await session.scalar(
        select(MemberHeartBoard).where(
            MemberHeartBoard.member_id == member.id,
            MemberHeartBoard.board_id == board_id,
        )
    )
    if heart is None:
        raise HeartNotFoundException()
    board = await get_board_or_raise(session, board_id)

    await session.delete(heart)
    await _add_heart_count(session, board_id, -1)
    await session.commit()
    await session.refresh(board)
    return board


async def scrap_board(session: AsyncSession, board_id: int, member: Member) -> None:
    board = await get_board_or_raise(session, board_id)
    scrap_member = await _get_member_or_raise(session, member.id)

    if await _scrap_exists(session, scrap_member.id, board.id):
        raise AlreadyScrapException()

    session.add(MemberScrapBoard(member_id=scrap_member.id, board_id=board.id))
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise AlreadyScrapException() from e


async def scrap_delete(session: AsyncSession, board_id: int, member: Member) -> None:
    board = await get_board_or_raise(session, board_id)
    scrap_member = await _get_member_or_raise(session, member.id)

    scrap = await session.scalar(
        select(MemberScrapBoard).where(
            MemberScrapBoard.member_id == scrap_member.id,
            MemberScrapBoard.board_id == board.id,
        )
    )
    if scrap is None:
        raise ScrapNotFoundException()

    await session.delete(scrap)
    await session.commit()

import pytest
from sqlalchemy import func, select

from copro.exceptions import (
    AlreadyHeartException,
    AlreadyScrapException,
    BoardNotFoundException,
    HeartNotFoundException,
    MemberNotFoundException,
    ScrapNotFoundException,
)
from copro.models.board import Board
from copro.models.heart import MemberHeartBoard
from copro.models.member import Member
from copro.models.scrap import MemberScrapBoard
from copro.services import board as board_service


class _Recorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, board, member):
        self.calls.append((board.id, member.id))


async def _heart_count(board_id: int) -> int:
    from copro.dependencies.mysql import _async_session

    async with _async_session() as session:
        return await session.scalar(
            select(Board.heart_count).where(Board.id == board_id)
        )


async def _link_count(model, board_id: int) -> int:
    from copro.dependencies.mysql import _async_session

    async with _async_session() as session:
        return await session.scalar(
            select(func.count()).select_from(model).where(model.board_id == board_id)
        )


class TestHeartBoard:
    async def test_success_notifies_owner(
        self, db_session, other_member, create_board
    ):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])
        notify = _Recorder()

        board = await board_service.heart_board(db_session, board_id, reader, notify)

        assert board.heart_count == 1
        assert await _heart_count(board_id) == 1
        assert await _link_count(MemberHeartBoard, board_id) == 1
        assert notify.calls == [(board_id, reader.id)]

    async def test_double_heart(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])
        notify = _Recorder()
        await board_service.heart_board(db_session, board_id, reader, notify)

        with pytest.raises(AlreadyHeartException):
            await board_service.heart_board(db_session, board_id, reader, notify)

        assert await _heart_count(board_id) == 1
        assert await _link_count(MemberHeartBoard, board_id) == 1
        assert len(notify.calls) == 1

    async def test_board_not_found(self, db_session, other_member):
        reader = await db_session.get(Member, other_member["id"])
        with pytest.raises(BoardNotFoundException):
            await board_service.heart_board(db_session, 9999, reader, _Recorder())

    async def test_notification_failure_keeps_heart(
        self, db_session, other_member, create_board
    ):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])

        # rabbitmq 미연결 상태의 publish는 RuntimeError를 발생시킵니다.
        board = await board_service.heart_board(db_session, board_id, reader)

        assert board.heart_count == 1
        assert await _heart_count(board_id) == 1

    async def test_unique_constraint_maps_to_already_heart(
        self, db_session, other_member, create_board, monkeypatch
    ):
        """존재 확인 이후 같은 좋아요가 먼저 저장된 경우"""
        from copro.dependencies.mysql import _async_session

        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])

        original = board_service._heart_exists

        async def _stale_exists(session, member_id, target_board_id):
            result = await original(session, member_id, target_board_id)
            async with _async_session() as other:
                other.add(MemberHeartBoard(member_id=member_id, board_id=target_board_id))
                await other.commit()
            return result

        monkeypatch.setattr(board_service, "_heart_exists", _stale_exists)
        with pytest.raises(AlreadyHeartException):
            await board_service.heart_board(db_session, board_id, reader, _Recorder())

        assert await _heart_count(board_id) == 0
        assert await _link_count(MemberHeartBoard, board_id) == 1


class TestHeartDelete:
    async def test_add_then_delete_nets_zero(
        self, db_session, other_member, create_board
    ):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])
        await board_service.heart_board(db_session, board_id, reader, _Recorder())

        board = await board_service.heart_delete(db_session, board_id, reader)

        assert board.heart_count == 0
        assert await _heart_count(board_id) == 0
        assert await _link_count(MemberHeartBoard, board_id) == 0

    async def test_without_heart(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])

        with pytest.raises(HeartNotFoundException):
            await board_service.heart_delete(db_session, board_id, reader)

        assert await _heart_count(board_id) == 0


class TestScrap:
    async def test_scrap_and_delete(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])

        await board_service.scrap_board(db_session, board_id, reader)
        assert await _link_count(MemberScrapBoard, board_id) == 1

        await board_service.scrap_delete(db_session, board_id, reader)
        assert await _link_count(MemberScrapBoard, board_id) == 0

    async def test_double_scrap(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])
        await board_service.scrap_board(db_session, board_id, reader)

        with pytest.raises(AlreadyScrapException):
            await board_service.scrap_board(db_session, board_id, reader)

        assert await _link_count(MemberScrapBoard, board_id) == 1

    async def test_delete_without_scrap(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])

        with pytest.raises(ScrapNotFoundException):
            await board_service.scrap_delete(db_session, board_id, reader)

    async def test_independent_of_heart(self, db_session, other_member, create_board):
        board_id = await create_board()
        reader = await db_session.get(Member, other_member["id"])
        await board_service.heart_board(db_session, board_id, reader, _Recorder())

        await board_service.scrap_board(db_session, board_id, reader)
        await board_service.heart_delete(db_session, board_id, reader)

        assert await _link_count(MemberScrapBoard, board_id) == 1
        assert await _link_count(MemberHeartBoard, board_id) == 0
        assert await _heart_count(board_id) == 0

    async def test_board_not_found(self, db_session, other_member):
        reader = await db_session.get(Member, other_member["id"])
        with pytest.raises(BoardNotFoundException):
            await board_service.scrap_board(db_session, 9999, reader)

    async def test_member_not_found(self, db_session, create_board):
        board_id = await create_board()
        with pytest.raises(MemberNotFoundException):
            await board_service.scrap_board(db_session, board_id, Member(id=9999))

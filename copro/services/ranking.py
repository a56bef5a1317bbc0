"""
인기 게시물(좋아요 증가량 1위) 집계.

직전 집계 시점의 게시물별 좋아요 수를 Valkey hash에 스냅샷으로 저장해두고,
다음 집계 때 증가량이 가장 큰 게시물의 id를 저장합니다.
"""

import asyncio
import logging

import redis.asyncio as aioredis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from copro.dependencies.mysql import new_session
from copro.dependencies.valkey import get_client
from copro.exceptions import MostIncreasedHeartsBoardNotFoundException
from copro.models.board import Board

logger = logging.getLogger(__name__)

_HEART_SNAPSHOT_KEY = "ranking:board_heart_snapshot"
_MOST_INCREASED_KEY = "ranking:most_increased_hearts_board_id"


async def refresh_most_increased_hearts(
    session: AsyncSession, client: aioredis.Redis
) -> int | None:
    result = await session.execute(
        select(Board.id, Board.heart_count).order_by(Board.id)
    )
    heart_counts = {board_id: heart_count for board_id, heart_count in result.all()}
    snapshot = await client.hgetall(_HEART_SNAPSHOT_KEY)

    best_id = None
    best_increase = None
    # id 오름차순으로 순회하므로 증가량이 같으면 id가 작은 게시물이 선택됩니다.
    for board_id, heart_count in heart_counts.items():
        increase = heart_count - int(snapshot.get(str(board_id), 0))
        if best_increase is None or increase > best_increase:
            best_id, best_increase = board_id, increase

    await client.delete(_HEART_SNAPSHOT_KEY)
    if heart_counts:
        await client.hset(
            _HEART_SNAPSHOT_KEY,
            mapping={str(k): v for k, v in heart_counts.items()},
        )

    if best_id is None:
        await client.delete(_MOST_INCREASED_KEY)
    else:
        await client.set(_MOST_INCREASED_KEY, best_id)

    logger.info("인기 게시물 집계 완료: board_id=%s increase=%s", best_id, best_increase)
    return best_id


async def get_most_increased_hearts_board_id(client: aioredis.Redis) -> int:
    board_id = await client.get(_MOST_INCREASED_KEY)
    if board_id is None:
        raise MostIncreasedHeartsBoardNotFoundException()
    return int(board_id)


async def run_heart_ranking(interval_seconds: int) -> None:
    """lifespan에서 background task로 실행하는 집계 루프"""
    while True:
        try:
            async with new_session() as session:
                await refresh_most_increased_hearts(session, get_client())
        except Exception:
            logger.exception("인기 게시물 집계 실패")
        await asyncio.sleep(interval_seconds)

import logging

import redis.asyncio as aioredis

from copro.config.config import settings

logger = logging.getLogger(__name__)

# 인기 게시물 집계 스냅샷 전용 클라이언트 (Valkey는 Redis 프로토콜 호환)
_client = aioredis.Redis(
    host=settings.valkey.host,
    port=settings.valkey.port,
    password=settings.valkey.passwd,
    decode_responses=True,
)


def get_client() -> aioredis.Redis:
    """
    `valkey: Redis = Depends(get_client)`로 사용
    """
    return _client


async def startup() -> None:
    pong = await _client.ping()
    logger.info(
        "Valkey 연결 완료: %s:%s PING=%s",
        settings.valkey.host,
        settings.valkey.port,
        pong,
    )


async def shutdown() -> None:
    await _client.aclose()

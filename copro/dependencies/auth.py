import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from copro.config.config import settings
from copro.dependencies.mysql import get_session
from copro.models.member import Member

logger = logging.getLogger(__name__)


def create_access_token(member_id: int) -> str:
    """
    JWT 액세스 토큰을 생성합니다.
    토큰 발급(로그인)은 외부 인증 서버의 역할이며, 운영 도구와 테스트에서 사용합니다.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(member_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt.expire_minutes),
    }
    return jwt.encode(
        payload, settings.jwt.secret_key, algorithm=settings.jwt.algorithm
    )


async def get_current_member(
    authorization: str = Header(...),
    session: AsyncSession = Depends(get_session),
) -> Member:
    """Authorization 헤더에서 JWT 토큰을 추출하여 현재 회원을 반환합니다."""
    try:
        scheme, token = authorization.split(" ", 1)
        if scheme.lower() != "bearer":
            raise HTTPException(status_code=401, detail="Invalid authentication scheme")
    except ValueError as e:
        raise HTTPException(
            status_code=401, detail="Invalid authorization header format"
        ) from e

    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key,
            algorithms=[settings.jwt.algorithm],
        )
        member_id = int(payload["sub"])
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=401, detail="Token has expired") from e
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e

    member = await session.get(Member, member_id)
    if member is None:
        logger.warning("토큰의 회원이 존재하지 않습니다: member_id=%s", member_id)
        raise HTTPException(status_code=401, detail="Member not found")

    return member

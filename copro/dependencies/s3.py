import logging
from typing import AsyncGenerator

import aioboto3
from botocore.exceptions import ClientError

from copro.config.config import settings

logger = logging.getLogger(__name__)

_session = aioboto3.Session(
    aws_access_key_id=settings.s3.access_key,
    aws_secret_access_key=settings.s3.secret_key,
    region_name=settings.s3.region,
)


def _client():
    return _session.client("s3", endpoint_url=settings.s3.endpoint_url)


async def get_s3_client() -> AsyncGenerator:
    """
    `s3 = Depends(get_s3_client)`로 사용
    이미지 업로드/삭제 요청마다 client를 생성하고 요청이 끝나면 닫습니다.
    """
    async with _client() as client:
        yield client


async def startup() -> None:
    """이미지 버킷이 없으면 생성합니다."""
    bucket = settings.s3.bucket_name
    async with _client() as s3:
        try:
            await s3.head_bucket(Bucket=bucket)
        except ClientError as e:
            if e.response["Error"]["Code"] not in ("404", "NoSuchBucket"):
                raise
            await s3.create_bucket(Bucket=bucket)
            logger.info("이미지 버킷 생성: %s", bucket)
    logger.info("S3 연결 완료: bucket=%s url=%s", bucket, settings.s3.base_url)

import logging
import os
import uuid

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from copro.config.config import settings
from copro.exceptions import ImageNotFoundException, InvalidImageFileException
from copro.models.board import Board
from copro.models.image import Image
from copro.models.member import Member
from copro.services.board import ensure_board_owner

logger = logging.getLogger(__name__)

IMAGE_KEY_PREFIX = "images"


def _validate_image_file(file: UploadFile) -> None:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise InvalidImageFileException(file.filename, file.content_type)


def _storage_key(filename: str | None) -> str:
    _, ext = os.path.splitext(filename or "")
    return f"{IMAGE_KEY_PREFIX}/{uuid.uuid4().hex}{ext.lower()}"


async def upload_images(
    session: AsyncSession, s3, files: list[UploadFile]
) -> list[Image]:
    """
    이미지를 S3에 업로드하고 매핑되지 않은 Image row를 생성합니다.
    게시물과의 매핑은 게시물 등록/수정 시 image_ids로 이루어집니다.
    """
    # 하나라도 이미지가 아니면 아무것도 업로드하지 않습니다.
    for file in files:
        _validate_image_file(file)

    images = []
    for file in files:
        key = _storage_key(file.filename)
        body = await file.read()
        await s3.put_object(
            Bucket=settings.s3.bucket_name,
            Key=key,
            Body=body,
            ContentType=file.content_type,
        )
        image = Image(url=f"{settings.s3.base_url}/{key}", storage_key=key)
        session.add(image)
        images.append(image)
        logger.info("이미지 업로드: key=%s size=%d", key, len(body))

    await session.commit()
    for image in images:
        await session.refresh(image)
    return images


async def find_image(session: AsyncSession, image_id: int) -> Image:
    image = await session.get(Image, image_id)
    if image is None:
        raise ImageNotFoundException(image_id)
    return image


async def delete_image(
    session: AsyncSession,
    s3,
    image_id: int,
    board_id: int | None,
    member: Member,
) -> None:
    image = await find_image(session, image_id)
    if board_id is not None and image.board_id != board_id:
        raise ImageNotFoundException(image_id)

    if image.is_mapped:
        board = await session.get(Board, image.board_id)
        if board is not None:
            ensure_board_owner(board, member)

    storage_key = image.storage_key
    await session.delete(image)
    await session.commit()
    # row가 먼저 삭제된 뒤에 객체를 지웁니다. commit 실패 시 객체는 남아 있습니다.
    await s3.delete_object(Bucket=settings.s3.bucket_name, Key=storage_key)
    logger.info("이미지 삭제: image_id=%s member_id=%s", image_id, member.id)

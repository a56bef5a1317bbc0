from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from copro.dependencies.auth import get_current_member
from copro.dependencies.mysql import get_session
from copro.dependencies.s3 import get_s3_client
from copro.models.member import Member
from copro.schemas.board import ImageResponse
from copro.schemas.response import ApiResponse
from copro.services import image as image_service

router = APIRouter(prefix="/api/v1/images", tags=["Image"])


@router.post("", response_model=ApiResponse[list[ImageResponse]])
async def upload_images(
    files: list[UploadFile] = File(...),
    _current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
    s3=Depends(get_s3_client),
) -> ApiResponse[list[ImageResponse]]:
    """이미지 업로드. 반환된 image_id를 게시물 등록/수정 요청의 image_ids에 사용합니다."""
    images = await image_service.upload_images(session, s3, files)
    return ApiResponse(
        message="업로드 완료", data=[ImageResponse.of(image) for image in images]
    )


@router.get("/{image_id}", response_model=ApiResponse[ImageResponse])
async def get_image(
    image_id: int,
    _current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[ImageResponse]:
    image = await image_service.find_image(session, image_id)
    return ApiResponse(message="이미지 조회 완료", data=ImageResponse.of(image))


@router.delete("/{image_id}", response_model=ApiResponse[None])
async def delete_image(
    image_id: int,
    board_id: int | None = Query(default=None, alias="boardId"),
    current_member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_session),
    s3=Depends(get_s3_client),
) -> ApiResponse[None]:
    await image_service.delete_image(session, s3, image_id, board_id, current_member)
    return ApiResponse(message="이미지 삭제 완료")

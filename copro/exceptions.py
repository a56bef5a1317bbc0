"""
도메인 예외 정의.

서비스 계층에서 발생시키고, `copro.exception_handler`에서 공통 응답 형식으로 변환합니다.
"""

from starlette import status


class CoproException(Exception):
    """모든 도메인 예외의 기반 클래스"""

    def __init__(
        self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundGroupException(CoproException):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class AccessDeniedGroupException(CoproException):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class ConflictGroupException(CoproException):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class InvalidGroupException(CoproException):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


# ─── not found ───────────────────────────────────────────────────────────────


class BoardNotFoundException(NotFoundGroupException):
    def __init__(self, board_id: int | None = None) -> None:
        self.board_id = board_id
        if board_id is None:
            super().__init__("게시물을 찾을 수 없습니다.")
        else:
            super().__init__(f"{board_id}번 게시물을 찾을 수 없습니다.")


class MemberNotFoundException(NotFoundGroupException):
    def __init__(self, member_id: int | None = None) -> None:
        self.member_id = member_id
        super().__init__("회원을 찾을 수 없습니다.")


class ImageNotFoundException(NotFoundGroupException):
    def __init__(self, image_id: int | None = None) -> None:
        self.image_id = image_id
        if image_id is None:
            super().__init__("이미지를 찾을 수 없습니다.")
        else:
            super().__init__(f"{image_id}번 이미지를 찾을 수 없습니다.")


class HeartNotFoundException(NotFoundGroupException):
    def __init__(self) -> None:
        super().__init__("좋아요를 누르지 않은 게시물입니다.")


class ScrapNotFoundException(NotFoundGroupException):
    def __init__(self) -> None:
        super().__init__("스크랩하지 않은 게시물입니다.")


class MostIncreasedHeartsBoardNotFoundException(NotFoundGroupException):
    def __init__(self) -> None:
        super().__init__("아직 집계된 인기 게시물이 없습니다.")


# ─── ownership ───────────────────────────────────────────────────────────────


class NotBoardOwnerException(AccessDeniedGroupException):
    def __init__(self) -> None:
        super().__init__("게시물 작성자만 수정/삭제할 수 있습니다.")


# ─── state conflict ──────────────────────────────────────────────────────────


class AlreadyHeartException(ConflictGroupException):
    def __init__(self) -> None:
        super().__init__("이미 좋아요를 누른 게시물입니다.")


class AlreadyScrapException(ConflictGroupException):
    def __init__(self) -> None:
        super().__init__("이미 스크랩한 게시물입니다.")


class MappedImageException(ConflictGroupException):
    def __init__(self, image_id: int) -> None:
        self.image_id = image_id
        super().__init__(f"{image_id}번 이미지는 이미 게시물에 매핑되어 있습니다.")


class ImageCountExceededException(ConflictGroupException):
    def __init__(self, max_images: int = 5) -> None:
        self.max_images = max_images
        super().__init__(f"게시물 하나에 이미지는 최대 {max_images}개까지 등록할 수 있습니다.")


# ─── invalid input ───────────────────────────────────────────────────────────


class InvalidImageFileException(InvalidGroupException):
    def __init__(self, filename: str | None, content_type: str | None) -> None:
        self.filename = filename
        self.content_type = content_type
        super().__init__(
            f"이미지 파일만 업로드할 수 있습니다: {filename} ({content_type})"
        )

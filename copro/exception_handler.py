import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from copro.exceptions import CoproException

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int, message: str, headers: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status_code": status_code, "message": message, "data": None},
        headers=headers,
    )


def custom_exception_handler(_request: Request, exc: HTTPException):
    """
    fastapi.HTTPException과 라우팅 실패(404/405) 등 starlette HTTPException을 함께 처리합니다.
    """
    return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


def _describe_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}"


def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "요청 값이 올바르지 않습니다. " + "; ".join(
        _describe_error(error) for error in exc.errors()
    )
    logger.info("요청 검증 실패: %s %s -> %s", request.method, request.url.path, message)
    return _error_response(422, message)


def copro_exception_handler(request: Request, exc: CoproException):
    logger.info(
        "요청 거부: %s %s -> %s %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return _error_response(exc.status_code, exc.message)

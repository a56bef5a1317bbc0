import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from copro.config.config import settings
from copro.dependencies import mysql, rabbitmq, s3, valkey
from copro.exception_handler import (
    copro_exception_handler,
    custom_exception_handler,
    validation_exception_handler,
)
from copro.exceptions import CoproException

# 모든 모델을 import하여 Base.metadata에 등록
import copro.models.board  # noqa: F401
import copro.models.comment  # noqa: F401
import copro.models.heart  # noqa: F401
import copro.models.image  # noqa: F401
import copro.models.member  # noqa: F401
import copro.models.scrap  # noqa: F401

from copro.routers import board as board_router
from copro.routers import image as image_router
from copro.routers import member as member_router
from copro.services.ranking import run_heart_ranking

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await mysql.startup()
    await valkey.startup()
    await rabbitmq.startup()
    await s3.startup()

    ranking_task = None
    if settings.ranking.enabled:
        ranking_task = asyncio.create_task(
            run_heart_ranking(settings.ranking.interval_seconds)
        )
        logger.info(
            "인기 게시물 집계 시작: interval=%ds", settings.ranking.interval_seconds
        )
    yield
    if ranking_task is not None:
        ranking_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ranking_task
    await rabbitmq.shutdown()
    await valkey.shutdown()
    await mysql.shutdown()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(HTTPException, custom_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(CoproException, copro_exception_handler)

app.include_router(board_router.router)
app.include_router(image_router.router)
app.include_router(member_router.router)


@app.get(
    "/health",
    tags=["Health Check"],
    summary="Health Check용 API",
)
async def health_check() -> str:
    return "ok"

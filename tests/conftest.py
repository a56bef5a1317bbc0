import os
import tempfile

# copro 모듈을 import하기 전에 테스트용 설정을 주입합니다 (settings는 import 시점에 생성됨).
_DB_PATH = os.path.join(tempfile.gettempdir(), f"copro_test_{os.getpid()}.db")
os.environ.setdefault("MYSQL__URL", f"sqlite+aiosqlite:///{_DB_PATH}")
os.environ.setdefault("JWT__SECRET_KEY", "copro-test-secret-key-0123456789abcdef")
os.environ.setdefault("RANKING__ENABLED", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402


class FakeS3Client:
    """put_object/delete_object 호출만 기록하는 S3 client"""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []

    async def put_object(self, Bucket: str, Key: str, Body: bytes, **kwargs):
        self.objects[Key] = Body

    async def delete_object(self, Bucket: str, Key: str, **kwargs):
        self.objects.pop(Key, None)
        self.deleted.append(Key)


class FakeValkey:
    """인기 게시물 집계에서 사용하는 명령만 구현한 in-memory Valkey"""

    def __init__(self):
        self.data: dict = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = str(value)

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)

    async def hgetall(self, key):
        return dict(self.data.get(key, {}))

    async def hset(self, key, mapping=None):
        self.data.setdefault(key, {}).update(
            {str(k): str(v) for k, v in (mapping or {}).items()}
        )


# ── DB ────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def init_db():
    """테스트마다 스키마를 DROP+CREATE 합니다."""
    import copro.main  # noqa: F401  모든 모델을 Base.metadata에 등록
    from copro.dependencies.mysql import Base, _engine

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # aiosqlite connection은 테스트별 event loop에 묶이므로 매번 반환합니다.
    await _engine.dispose()


@pytest.fixture
async def db_session(init_db):
    from copro.dependencies.mysql import _async_session

    async with _async_session() as session:
        yield session


# ── 외부 시스템 ───────────────────────────────────────────────────────────────


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def valkey_client():
    return FakeValkey()


@pytest.fixture
def published(monkeypatch) -> list[dict]:
    """RabbitMQ publish 호출을 가로채 기록합니다."""
    import json

    import copro.dependencies.rabbitmq as rabbitmq_mod

    messages = []

    async def _publish(routing_key: str, message: str):
        messages.append(
            {
                "routing_key": routing_key,
                "body": json.loads(message),
            }
        )

    monkeypatch.setattr(rabbitmq_mod, "publish", _publish)
    return messages


@pytest.fixture
async def api_client(init_db, s3_client, valkey_client, published):
    from copro.dependencies.s3 import get_s3_client
    from copro.dependencies.valkey import get_client
    from copro.main import app

    async def _s3_override():
        yield s3_client

    app.dependency_overrides[get_s3_client] = _s3_override
    app.dependency_overrides[get_client] = lambda: valkey_client
    try:
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


# ── 회원/게시물 ───────────────────────────────────────────────────────────────


async def _create_member(name: str, **kwargs) -> dict:
    from copro.dependencies.auth import create_access_token
    from copro.dependencies.mysql import _async_session
    from copro.models.member import Member

    async with _async_session() as session:
        member = Member(name=name, email=f"{name}@test.com", **kwargs)
        session.add(member)
        await session.commit()
        await session.refresh(member)
        member_id = member.id

    token = create_access_token(member_id)
    return {
        "id": member_id,
        "name": name,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
async def member(init_db) -> dict:
    return await _create_member(
        "writer", occupation="백엔드", language="Python,Java", career=3
    )


@pytest.fixture
async def other_member(init_db) -> dict:
    return await _create_member(
        "reader", occupation="프론트엔드", language="JavaScript", career=1
    )


@pytest.fixture
def create_member():
    """이름과 속성을 지정해 회원을 추가로 생성합니다."""
    return _create_member


@pytest.fixture
def create_images():
    """매핑되지 않은 이미지 row를 count개 생성하고 id 목록을 반환합니다."""

    async def _create(count: int) -> list[int]:
        from copro.dependencies.mysql import _async_session
        from copro.models.image import Image

        async with _async_session() as session:
            images = [
                Image(url=f"http://test/images/{i}.png", storage_key=f"images/{i}.png")
                for i in range(count)
            ]
            session.add_all(images)
            await session.commit()
            return [image.id for image in images]

    return _create


@pytest.fixture
def create_board(member):
    """게시물을 DB에 직접 생성합니다. 기본 작성자는 member 입니다."""

    async def _create(
        title: str = "테스트 게시물",
        category: str = "PROJECT",
        member_id: int | None = None,
        view_count: int = 0,
        heart_count: int = 0,
    ) -> int:
        from copro.dependencies.mysql import _async_session
        from copro.models.board import Board, Category

        async with _async_session() as session:
            board = Board(
                title=title,
                category=Category(category),
                contents="테스트 내용",
                part="백엔드",
                tag="python",
                member_id=member_id or member["id"],
                view_count=view_count,
                heart_count=heart_count,
            )
            session.add(board)
            await session.commit()
            return board.id

    return _create

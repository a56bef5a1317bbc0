from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class MySQLConfig(BaseModel):
    host: str = "localhost"
    user: str = "copro"
    passwd: str = "copro"
    port: int = 3306
    db: str = "copro"
    echo: bool = False
    # 테스트 등에서 다른 드라이버(sqlite+aiosqlite 등)를 쓰고 싶을 때 지정
    url: str | None = None

    @property
    def dsn(self) -> str:
        if self.url:
            return self.url
        return "mysql+asyncmy://{user}:{passwd}@{host}:{port}/{db}?charset=utf8mb4".format(
            user=self.user,
            passwd=self.passwd,
            host=self.host,
            port=self.port,
            db=self.db,
        )


class S3Config(BaseModel):
    endpoint_url: str = "http://localhost:9000"
    access_key: str = "minioadmin"
    secret_key: str = "minioadmin"
    bucket_name: str = "copro-images"
    region: str = "us-east-1"
    public_url: str | None = None

    @property
    def base_url(self) -> str:
        """업로드된 객체를 외부에서 조회할 때 사용할 URL prefix"""
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}"


class JwtConfig(BaseModel):
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 60


class ValkeyConfig(BaseModel):
    host: str = "localhost"
    port: int = 6379
    passwd: str | None = None


class RabbitMQConfig(BaseModel):
    host: str = "localhost"
    user: str = "guest"
    passwd: str = "guest"
    port: int = 5672
    exchange_name: str = "copro.notification"


class RankingConfig(BaseModel):
    enabled: bool = True
    interval_seconds: int = 3600


class BoardConfig(BaseModel):
    max_images: int = 5
    default_page_size: int = 7


class Settings(BaseSettings):
    mysql: MySQLConfig = MySQLConfig()
    s3: S3Config = S3Config()
    jwt: JwtConfig
    valkey: ValkeyConfig = ValkeyConfig()
    rabbitmq: RabbitMQConfig = RabbitMQConfig()
    ranking: RankingConfig = RankingConfig()
    board: BoardConfig = BoardConfig()

    model_config = SettingsConfigDict(
        env_file="copro/config/.env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )


@lru_cache
def get_settings():
    return Settings()


settings: Settings = get_settings()

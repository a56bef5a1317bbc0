import logging

import aio_pika

from copro.config.config import settings

logger = logging.getLogger(__name__)

# 알림 exchange는 startup에서 한 번만 선언하고 publish마다 재사용합니다.
_connection: aio_pika.abc.AbstractRobustConnection | None = None
_exchange: aio_pika.abc.AbstractExchange | None = None


def _amqp_url() -> str:
    config = settings.rabbitmq
    return f"amqp://{config.user}:{config.passwd}@{config.host}:{config.port}/"


async def startup() -> None:
    """서버 시작 시 RabbitMQ에 연결하고 알림 exchange(topic)를 선언합니다."""
    global _connection, _exchange
    _connection = await aio_pika.connect_robust(_amqp_url())
    channel = await _connection.channel()
    _exchange = await channel.declare_exchange(
        settings.rabbitmq.exchange_name, aio_pika.ExchangeType.TOPIC, durable=True
    )
    logger.info("RabbitMQ 연결 완료: exchange=%s", settings.rabbitmq.exchange_name)


async def shutdown() -> None:
    """서버 종료 시 연결을 닫습니다. channel은 connection과 함께 닫힙니다."""
    global _connection, _exchange
    if _connection is not None:
        await _connection.close()
    _connection = None
    _exchange = None


async def publish(routing_key: str, message: str) -> None:
    """알림 exchange로 JSON 메시지를 발행합니다."""
    if _exchange is None:
        raise RuntimeError("RabbitMQ 연결이 되어있지 않습니다.")

    await _exchange.publish(
        aio_pika.Message(
            body=message.encode(),
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        ),
        routing_key=routing_key,
    )

"""Kafka publishing for accepted telemetry."""
from __future__ import annotations

from typing import Any, Protocol

import structlog
from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from telemetry_gateway.core.exceptions import PublishError
from telemetry_gateway.domain.dto import PublishRequest
from telemetry_gateway.settings import Settings

logger = structlog.get_logger(__name__)


def _utf8(value: str) -> bytes:
    return value.encode("utf-8")


class MessagePublisher(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def publish(self, request: PublishRequest) -> Any: ...


class QueuePublisher:
    """Single-attempt keyed writes to Kafka.

    The producer is created in :meth:`start` because aiokafka binds it to the
    running event loop. One ``send`` is issued per :meth:`publish` call; any
    batching or retrying below that is the producer's own business.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        *,
        client_id: str,
        acks: int | str = "all",
        request_timeout_ms: int = 30_000,
        linger_ms: int = 0,
    ) -> None:
        self._config: dict[str, Any] = {
            "bootstrap_servers": bootstrap_servers,
            "client_id": client_id,
            "acks": acks,
            "request_timeout_ms": request_timeout_ms,
            "linger_ms": linger_ms,
            "key_serializer": _utf8,
            "value_serializer": _utf8,
        }
        self._producer: AIOKafkaProducer | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueuePublisher":
        return cls(
            settings.kafka_bootstrap_servers,
            client_id=settings.kafka_client_id,
            acks=settings.kafka_acks_value,
            request_timeout_ms=settings.kafka_request_timeout_ms,
            linger_ms=settings.kafka_linger_ms,
        )

    async def start(self) -> None:
        if self._producer is not None:
            return
        producer = AIOKafkaProducer(**self._config)
        await producer.start()
        self._producer = producer
        logger.info("kafka_producer_started", bootstrap_servers=self._config["bootstrap_servers"])

    async def stop(self) -> None:
        producer, self._producer = self._producer, None
        if producer is not None:
            await producer.stop()
            logger.info("kafka_producer_stopped")

    async def publish(self, request: PublishRequest) -> Any:
        """Send one message and wait for the broker acknowledgement."""
        if self._producer is None:
            raise PublishError("Kafka producer is not started")
        try:
            ack = await self._producer.send(request.topic, value=request.value, key=request.key)
            return await ack
        except KafkaError as exc:
            raise PublishError(f"Publish to {request.topic!r} failed: {exc}") from exc

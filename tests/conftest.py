from __future__ import annotations

import time
from typing import Any

import jwt
import pytest

from telemetry_gateway.core.exceptions import PublishError
from telemetry_gateway.domain.dto import PublishRequest
from telemetry_gateway.main import create_app
from telemetry_gateway.settings import Settings

JWT_SECRET = "test-secret-key-with-enough-length-for-hs256"
INGEST_PATH = "/data"
TOPIC = "data"


class RecordingPublisher:
    """In-memory stand-in for the Kafka publisher."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[PublishRequest] = []
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def publish(self, request: PublishRequest) -> Any:
        self.sent.append(request)
        if self.fail:
            raise PublishError("broker unavailable")
        return {"topic": request.topic, "partition": 0, "offset": len(self.sent) - 1}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_key=JWT_SECRET,
        ingest_path=INGEST_PATH,
        kafka_topic=TOPIC,
    )


@pytest.fixture
def make_token():
    def _make(claims: dict[str, Any] | None = None, *, key: str = JWT_SECRET, **extra: Any) -> str:
        payload: dict[str, Any] = {"device_id": "dev-1", "exp": int(time.time()) + 300}
        if claims is not None:
            payload = claims
        payload.update(extra)
        return jwt.encode(payload, key, algorithm="HS256")

    return _make


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
async def service_client(aiohttp_client, settings, publisher):
    app = create_app(settings, publisher=publisher)
    return await aiohttp_client(app)

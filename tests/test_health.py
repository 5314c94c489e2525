from __future__ import annotations


async def test_health_ok(service_client):
    resp = await service_client.get("/health")
    assert resp.status == 200
    payload = await resp.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "telemetry-gateway"


async def test_publisher_started_with_app(service_client, publisher):
    assert publisher.started is True


async def test_response_carries_request_id(service_client):
    resp = await service_client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"

    resp = await service_client.get("/health")
    assert resp.headers["X-Request-ID"]

"""aiohttp application entrypoint."""
from __future__ import annotations

from aiohttp import web

from telemetry_gateway.api.middleware.trace import create_trace_middleware
from telemetry_gateway.api.routes.telemetry import TelemetryDispatcher, setup_routes
from telemetry_gateway.logging_config import configure_logging
from telemetry_gateway.services.payload_parser import PayloadParser
from telemetry_gateway.services.publisher import MessagePublisher, QueuePublisher
from telemetry_gateway.services.token_verifier import TokenVerifier
from telemetry_gateway.settings import Settings, get_settings

SETTINGS_KEY = web.AppKey("settings", Settings)
PUBLISHER_KEY = web.AppKey("publisher", MessagePublisher)


async def start_publisher(app: web.Application) -> None:
    await app[PUBLISHER_KEY].start()


async def stop_publisher(app: web.Application) -> None:
    await app[PUBLISHER_KEY].stop()


async def healthcheck(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    return web.json_response({"status": "ok", "service": settings.app_name, "env": settings.env})


def create_app(
    settings: Settings | None = None,
    *,
    publisher: MessagePublisher | None = None,
) -> web.Application:
    """Create aiohttp application.

    ``publisher`` replaces the Kafka publisher built from settings; tests pass
    an in-memory one.
    """
    settings = settings or get_settings()
    publisher = publisher or QueuePublisher.from_settings(settings)

    app = web.Application(client_max_size=settings.client_max_size)
    app.middlewares.append(create_trace_middleware(settings.app_name))
    app[SETTINGS_KEY] = settings
    app[PUBLISHER_KEY] = publisher

    dispatcher = TelemetryDispatcher(
        TokenVerifier.from_settings(settings),
        PayloadParser(),
        publisher,
        topic=settings.kafka_topic,
        device_id_claim=settings.device_id_claim,
    )

    app.router.add_get("/health", healthcheck)
    setup_routes(app, dispatcher, settings.ingest_path)

    app.on_startup.append(start_publisher)
    app.on_cleanup.append(stop_publisher)

    return app


def main() -> None:
    """Run the application."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    web.run_app(create_app(settings), host=settings.host, port=settings.port, access_log=None)


if __name__ == "__main__":
    main()

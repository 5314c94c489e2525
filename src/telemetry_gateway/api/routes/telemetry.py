"""Telemetry ingest endpoint."""
from __future__ import annotations

import structlog
from aiohttp import hdrs, web
from aiohttp.http_exceptions import HttpProcessingError

from telemetry_gateway.core.exceptions import (
    PayloadError,
    PublishError,
    TokenParseError,
    TokenVerificationError,
)
from telemetry_gateway.domain.dto import PublishRequest
from telemetry_gateway.domain.outcomes import ResponseOutcome
from telemetry_gateway.services.payload_parser import PayloadParser
from telemetry_gateway.services.publisher import MessagePublisher
from telemetry_gateway.services.token_verifier import TokenVerifier, extract_device_id

logger = structlog.get_logger(__name__)


class TelemetryDispatcher:
    """Runs one ingest request through auth, parsing and publishing.

    :meth:`_process` only ever returns an outcome and :meth:`handle` renders
    it, so each request gets exactly one response whichever stage stops it.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        parser: PayloadParser,
        publisher: MessagePublisher,
        *,
        topic: str,
        device_id_claim: str,
    ) -> None:
        self._verifier = verifier
        self._parser = parser
        self._publisher = publisher
        self._topic = topic
        self._device_id_claim = device_id_claim

    async def handle(self, request: web.Request) -> web.Response:
        if request.method != hdrs.METH_POST:
            outcome = ResponseOutcome.METHOD_NOT_ALLOWED
        else:
            outcome = await self._process(request)
        return self._respond(outcome)

    async def _process(self, request: web.Request) -> ResponseOutcome:
        try:
            body = await request.read()
        except (OSError, HttpProcessingError) as exc:
            logger.warning("telemetry_body_read_failed", error=str(exc))
            return ResponseOutcome.TRANSPORT_READ_FAILURE

        try:
            claims = self._verifier.verify(request.headers.get(hdrs.AUTHORIZATION))
        except TokenParseError:
            return ResponseOutcome.AUTH_PARSE_FAILURE
        except TokenVerificationError:
            return ResponseOutcome.AUTH_VERIFICATION_FAILURE

        try:
            document = self._parser.parse(body)
        except PayloadError:
            return ResponseOutcome.BAD_PAYLOAD

        device_id = extract_device_id(claims, self._device_id_claim)
        if device_id is None:
            return ResponseOutcome.BAD_DEVICE_IDENTITY
        structlog.contextvars.bind_contextvars(device_id=device_id)

        try:
            value = self._parser.serialize_data(document)
        except PayloadError:
            return ResponseOutcome.BAD_PAYLOAD

        message = PublishRequest(topic=self._topic, key=device_id, value=value)
        try:
            await self._publisher.publish(message)
        except PublishError as exc:
            logger.error("telemetry_publish_failed", topic=message.topic, error=str(exc))
            return ResponseOutcome.PUBLISH_FAILURE

        logger.debug("telemetry_published", topic=message.topic, size=len(value))
        return ResponseOutcome.SUCCESS

    @staticmethod
    def _respond(outcome: ResponseOutcome) -> web.Response:
        response = web.Response(status=outcome.status, text=outcome.text or None)
        if outcome is ResponseOutcome.METHOD_NOT_ALLOWED:
            response.headers[hdrs.ALLOW] = hdrs.METH_POST
            response.force_close()

        if outcome is ResponseOutcome.SUCCESS:
            logger.info("telemetry_accepted", outcome=outcome.value, status=outcome.status)
        else:
            logger.info("telemetry_rejected", outcome=outcome.value, status=outcome.status)
        return response


def setup_routes(app: web.Application, dispatcher: TelemetryDispatcher, path: str) -> None:
    """Bind the dispatcher to ``path`` for every method; it answers non-POST itself."""
    app.router.add_route("*", path, dispatcher.handle)

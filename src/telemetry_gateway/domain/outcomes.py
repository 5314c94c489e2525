"""Terminal outcomes of an ingest request and their HTTP rendering."""
from __future__ import annotations

from enum import Enum

_BAD_REQUEST = "400: Bad Request"
_SERVER_ERROR = "500: Internal Server Error"


class ResponseOutcome(str, Enum):
    """Every ingest request ends in exactly one of these."""

    METHOD_NOT_ALLOWED = "method_not_allowed"
    TRANSPORT_READ_FAILURE = "transport_read_failure"
    AUTH_PARSE_FAILURE = "auth_parse_failure"
    AUTH_VERIFICATION_FAILURE = "auth_verification_failure"
    BAD_PAYLOAD = "bad_payload"
    BAD_DEVICE_IDENTITY = "bad_device_identity"
    PUBLISH_FAILURE = "publish_failure"
    SUCCESS = "success"

    @property
    def status(self) -> int:
        return _RENDERING[self][0]

    @property
    def text(self) -> str:
        return _RENDERING[self][1]


_RENDERING: dict[ResponseOutcome, tuple[int, str]] = {
    ResponseOutcome.METHOD_NOT_ALLOWED: (405, ""),
    ResponseOutcome.TRANSPORT_READ_FAILURE: (500, _SERVER_ERROR),
    ResponseOutcome.AUTH_PARSE_FAILURE: (401, "Token could not be parsed"),
    ResponseOutcome.AUTH_VERIFICATION_FAILURE: (401, "Token could not be verified"),
    ResponseOutcome.BAD_PAYLOAD: (400, _BAD_REQUEST),
    ResponseOutcome.BAD_DEVICE_IDENTITY: (400, _BAD_REQUEST),
    ResponseOutcome.PUBLISH_FAILURE: (500, _SERVER_ERROR),
    ResponseOutcome.SUCCESS: (200, ""),
}

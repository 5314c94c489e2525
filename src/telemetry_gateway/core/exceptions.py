"""Domain/service exceptions."""
from __future__ import annotations


class GatewayError(Exception):
    """Base error for the ingest pipeline."""


class TokenError(GatewayError):
    """Raised when the bearer token cannot be accepted."""


class TokenParseError(TokenError):
    """Raised when the token is missing or structurally invalid."""


class TokenVerificationError(TokenError):
    """Raised when the token decodes but fails signature or claim checks."""


class PayloadError(GatewayError):
    """Raised when the request body cannot be forwarded."""


class PayloadParseError(PayloadError):
    """Raised when the body is not a well-formed JSON object."""


class MissingDataFieldError(PayloadError):
    """Raised when the document has no ``data`` member."""


class PublishError(GatewayError):
    """Raised when the broker rejects or fails to acknowledge a message."""

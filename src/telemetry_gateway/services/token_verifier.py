"""Bearer token verification.

Tokens are JWTs checked in two stages so that callers can tell a token that
is garbage apart from a token that is well-formed but not acceptable:

* parse: the compact serialization is decoded without any verification.
* verify: signature, algorithm allow-list and registered claims are checked.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from types import MappingProxyType

import jwt
import structlog

from telemetry_gateway.core.exceptions import TokenParseError, TokenVerificationError
from telemetry_gateway.domain.dto import ClaimSet
from telemetry_gateway.settings import Settings

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "bearer "


def _strip_scheme(header_value: str | None) -> str:
    if header_value is None:
        raise TokenParseError("Authorization header is missing")
    token = header_value.strip()
    if token[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = token[len(BEARER_PREFIX) :].strip()
    if not token:
        raise TokenParseError("Bearer token is empty")
    return token


class TokenVerifier:
    """Verifies device tokens against a fixed key and claim policy."""

    def __init__(
        self,
        key: str,
        algorithms: Sequence[str],
        *,
        issuer: str | None = None,
        audience: str | None = None,
        leeway_sec: int = 0,
        required_claims: Iterable[str] = (),
    ) -> None:
        if not algorithms:
            raise ValueError("At least one JWT algorithm must be allowed")
        self._key = key
        self._algorithms = tuple(algorithms)
        self._issuer = issuer
        self._audience = audience
        self._leeway = leeway_sec
        self._required = tuple(required_claims)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        return cls(
            settings.jwt_key,
            settings.jwt_algorithms,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            leeway_sec=settings.jwt_leeway_sec,
            required_claims=settings.jwt_required_claims,
        )

    def verify(self, header_value: str | None) -> ClaimSet:
        """Return the verified claim set carried by an ``Authorization`` header value."""
        token = _strip_scheme(header_value)

        try:
            jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as exc:
            logger.debug("token_parse_failed", reason=str(exc))
            raise TokenParseError(str(exc)) from exc

        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=list(self._algorithms),
                issuer=self._issuer,
                audience=self._audience,
                leeway=self._leeway,
                options={"require": list(self._required)},
            )
        except (jwt.InvalidTokenError, jwt.InvalidKeyError) as exc:
            logger.debug("token_verification_failed", reason=str(exc))
            raise TokenVerificationError(str(exc)) from exc

        return MappingProxyType(claims)


def extract_device_id(claims: ClaimSet | None, claim: str) -> str | None:
    """Device identifier from a claim set, or None when it is absent, empty or not a string."""
    if claims is None:
        return None
    value = claims.get(claim)
    if isinstance(value, str) and value:
        return value
    return None

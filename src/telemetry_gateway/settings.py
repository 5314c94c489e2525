"""Application settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core configuration for the Telemetry Gateway."""

    model_config = SettingsConfigDict(env_file=(".env", "env.example"), env_file_encoding="utf-8")

    env: Literal["development", "staging", "production"] = "development"
    app_name: str = "telemetry-gateway"
    host: str = "0.0.0.0"
    port: int = 8080

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    ingest_path: str = "/data"
    # Enforced by aiohttp itself; the gateway adds no size checks of its own
    client_max_size: int = 1024**2

    # HMAC secret or PEM-encoded public key, depending on the algorithm
    jwt_key: str = Field(default="dev-secret-key-change-in-production")
    # Use a string field to avoid JSON parsing by pydantic-settings
    jwt_algorithms_str: str = Field(default="HS256", alias="JWT_ALGORITHMS")
    # This field is populated by the validator, not from env vars
    jwt_algorithms: list[str] = Field(
        default=["HS256"],
        validation_alias="__jwt_algorithms_internal__",
    )
    jwt_required_claims_str: str = Field(default="", alias="JWT_REQUIRED_CLAIMS")
    jwt_required_claims: list[str] = Field(
        default=[],
        validation_alias="__jwt_required_claims_internal__",
    )
    jwt_issuer: str | None = None
    jwt_audience: str | None = None
    jwt_leeway_sec: int = 0
    device_id_claim: str = "device_id"

    kafka_bootstrap_servers: str = "localhost:9092"
    kafka_client_id: str = "telemetry-gateway"
    kafka_topic: str = "data"
    kafka_acks: Literal["0", "1", "all"] = "all"
    kafka_request_timeout_ms: int = 30_000
    kafka_linger_ms: int = 0

    @model_validator(mode="after")
    def parse_jwt_algorithms(self) -> "Settings":
        """Parse JWT algorithms from comma-separated string after model initialization."""
        value = self.jwt_algorithms_str
        if value:
            self.jwt_algorithms = [alg.strip() for alg in value.split(",") if alg.strip()]
        return self

    @model_validator(mode="after")
    def parse_jwt_required_claims(self) -> "Settings":
        """Parse required JWT claims from comma-separated string after model initialization."""
        value = self.jwt_required_claims_str
        if value:
            self.jwt_required_claims = [claim.strip() for claim in value.split(",") if claim.strip()]
        return self

    @property
    def kafka_acks_value(self) -> int | str:
        """Value of ``acks`` as aiokafka expects it."""
        return self.kafka_acks if self.kafka_acks == "all" else int(self.kafka_acks)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()

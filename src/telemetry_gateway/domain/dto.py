"""Pydantic DTOs and value objects for telemetry ingest."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

# Verified token payload; read-only once produced by the verifier
ClaimSet = Mapping[str, Any]

DATA_FIELD = "data"


class TelemetryDocument(BaseModel):
    """Parsed request body. Only ``data`` is of interest, other members are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: Any = None

    @property
    def has_data(self) -> bool:
        # An explicit JSON null counts as present
        return DATA_FIELD in self.model_fields_set


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """A single keyed message bound for the broker."""

    topic: str
    key: str
    value: str

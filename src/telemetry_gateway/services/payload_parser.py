"""Request body parsing."""
from __future__ import annotations

import json
from typing import Any

from telemetry_gateway.core.exceptions import MissingDataFieldError, PayloadParseError
from telemetry_gateway.domain.dto import DATA_FIELD, TelemetryDocument


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are accepted by the json module but are not JSON
    raise ValueError(f"Non-standard JSON constant: {name}")


class PayloadParser:
    """Turns raw request bytes into a :class:`TelemetryDocument`.

    Only structural well-formedness is checked by :meth:`parse`; whether the
    document carries a ``data`` member is left to :meth:`serialize_data`.
    """

    def parse(self, body: bytes) -> TelemetryDocument:
        try:
            document = json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            raise PayloadParseError("Invalid JSON payload") from exc
        if not isinstance(document, dict):
            raise PayloadParseError("JSON body must be an object")
        return TelemetryDocument.model_validate(document)

    def serialize_data(self, document: TelemetryDocument) -> str:
        """Compact JSON text of the document's ``data`` member."""
        if not document.has_data:
            raise MissingDataFieldError(f"JSON body has no '{DATA_FIELD}' member")
        return self.serialize(document.data)

    @staticmethod
    def serialize(value: Any) -> str:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

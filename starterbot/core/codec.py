"""Envelope codec — canonical JSON encode/decode of envelopes.

Decoding selects the Pydantic model from the ``event_type`` field and
validates every field; nothing freeform gets through.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from starterbot.models.envelopes import ENVELOPE_TYPE_MAP, EnvelopeBase, EventType


class EnvelopeValidationError(ValueError):
    """Raised when an envelope fails validation."""


def canonical_json(model: BaseModel) -> bytes:
    """Encode *model* with sorted keys and no whitespace.

    Envelopes and stored failure records share this form, so equal models
    always produce identical bytes.
    """
    data = model.model_dump(mode="json")
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


class EnvelopeCodec:
    """Serializes and deserializes envelopes in their canonical JSON form."""

    @staticmethod
    def serialize(envelope: EnvelopeBase) -> bytes:
        """Serialize an envelope to canonical JSON bytes."""
        return canonical_json(envelope)

    @staticmethod
    def decode(raw_json: bytes | str) -> EnvelopeBase:
        """Deserialize and validate a raw JSON envelope."""
        if isinstance(raw_json, bytes):
            raw_json = raw_json.decode("utf-8")

        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            raise EnvelopeValidationError(f"Invalid JSON: {exc}") from exc

        return EnvelopeCodec.from_dict(data)

    @staticmethod
    def from_dict(data: Any) -> EnvelopeBase:
        """Validate an already-parsed envelope mapping."""
        if not isinstance(data, dict):
            raise EnvelopeValidationError(
                f"Envelope must be a JSON object, got {type(data).__name__}"
            )

        type_str = data.get("event_type")
        if not type_str:
            raise EnvelopeValidationError("Missing event_type field")

        try:
            event_type = EventType(type_str)
        except ValueError as exc:
            raise EnvelopeValidationError(
                f"Unknown event_type: {type_str!r}"
            ) from exc

        model_cls = ENVELOPE_TYPE_MAP[event_type]
        try:
            return model_cls.model_validate(data)
        except ValidationError as exc:
            raise EnvelopeValidationError(
                f"Envelope validation failed: {exc}"
            ) from exc

"""Tests for EnvelopeCodec and the envelope models."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from starterbot.core.codec import EnvelopeCodec, EnvelopeValidationError, canonical_json
from starterbot.models.envelopes import (
    ActionEnvelope,
    CommandEnvelope,
    EventType,
    MessageEnvelope,
    PlatformEventEnvelope,
    ShortcutEnvelope,
)


class TestEnvelopeModels:
    def test_ack_requirement_by_category(self, make_command, make_message, make_shortcut):
        assert make_command().requires_ack is True
        assert make_shortcut().requires_ack is True
        assert make_message().requires_ack is False
        assert PlatformEventEnvelope(name="app_home_opened").requires_ack is False

    def test_routing_keys(self, make_command, make_message, make_action, make_view_submission):
        assert make_command("/greet").routing_key == "/greet"
        assert make_message("hi").routing_key == "hi"
        assert make_action("btn").routing_key == "btn"
        assert make_view_submission("cb").routing_key == "cb"

    def test_envelopes_are_frozen(self, make_command):
        envelope = make_command()
        with pytest.raises(ValidationError):
            envelope.name = "/other"  # type: ignore[misc]

    def test_unique_envelope_ids(self, make_command):
        assert make_command().envelope_id != make_command().envelope_id

    def test_reply_targets(self):
        assert CommandEnvelope(name="/x", user_id="U1").reply_target() == "U1"
        assert CommandEnvelope(name="/x", user_id="U1", channel_id="C1").reply_target() == "C1"
        assert ShortcutEnvelope(callback_id="s", trigger_id="t", invoker_id="U9").reply_target() == "U9"
        assert ActionEnvelope(action_id="a").reply_target() is None


class TestEnvelopeCodec:
    def test_serialize_is_canonical(self, make_command):
        raw = EnvelopeCodec.serialize(make_command())
        data = json.loads(raw)
        assert list(data) == sorted(data)

    def test_decode_selects_variant(self):
        raw = json.dumps({"event_type": "message", "text": "hi", "author_id": "U1", "channel_id": "C1"})
        envelope = EnvelopeCodec.decode(raw)
        assert isinstance(envelope, MessageEnvelope)
        assert envelope.event_type == EventType.MESSAGE

    def test_decode_round_trip_preserves_identity(self, make_command):
        original = make_command("/greet", args="now")
        decoded = EnvelopeCodec.decode(EnvelopeCodec.serialize(original))
        assert decoded == original

    @pytest.mark.parametrize(
        ("raw", "message"),
        [
            ("{not json", "Invalid JSON"),
            ("[1, 2]", "must be a JSON object"),
            ('{"text": "hi"}', "Missing event_type"),
            ('{"event_type": "reaction"}', "Unknown event_type"),
            ('{"event_type": "command"}', "validation failed"),
        ],
    )
    def test_decode_rejects(self, raw, message):
        with pytest.raises(EnvelopeValidationError, match=message):
            EnvelopeCodec.decode(raw)

    def test_canonical_json_is_sorted_and_compact(self):
        envelope = MessageEnvelope(
            envelope_id="e1", text="hi", author_id="U1", channel_id="C1",
            received_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        raw = canonical_json(envelope)
        assert raw.startswith(b'{"author_id":"U1","channel_id":"C1","envelope_id":"e1"')
        assert b" " not in raw
        assert canonical_json(EnvelopeCodec.decode(raw)) == raw

"""Tests for dispatch outcome models."""

from __future__ import annotations

import pytest

from starterbot.models import (
    AckState,
    DispatchOutcome,
    DispatchResult,
    EventType,
    HandlerFailure,
)


class TestDispatchResult:
    @pytest.mark.parametrize(
        ("outcome", "ok"),
        [
            (DispatchOutcome.HANDLED, True),
            (DispatchOutcome.NO_MATCH, True),
            (DispatchOutcome.HANDLER_FAILED, False),
            (DispatchOutcome.ACK_FAILED, False),
        ],
    )
    def test_ok(self, outcome, ok):
        result = DispatchResult(envelope_id="e", event_type=EventType.COMMAND, outcome=outcome)
        assert result.ok is ok

    def test_defaults(self):
        result = DispatchResult(envelope_id="e", event_type=EventType.MESSAGE, outcome=DispatchOutcome.NO_MATCH)
        assert result.ack_state == AckState.PENDING
        assert result.handler is None
        assert result.error is None


class TestHandlerFailure:
    def test_serializes_event_type_as_value(self):
        failure = HandlerFailure(
            envelope_id="e",
            event_type=EventType.SHORTCUT,
            routing_key="modal_shortcut",
            handler="open_sample_modal",
            error_type="KeyError",
            error_message="'trigger_id'",
        )
        data = failure.model_dump(mode="json")
        assert data["event_type"] == "shortcut"
        assert data["occurred_at"].endswith("Z") or "+00:00" in data["occurred_at"]

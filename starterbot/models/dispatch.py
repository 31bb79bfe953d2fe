"""Dispatch outcome models — acknowledgment state, results, failure records."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from starterbot.models.envelopes import EventType


class AckState(str, Enum):
    """Per-envelope acknowledgment state."""

    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"


class DispatchOutcome(str, Enum):
    """What happened to a single routed envelope."""

    HANDLED = "handled"
    NO_MATCH = "no_match"
    HANDLER_FAILED = "handler_failed"
    ACK_FAILED = "ack_failed"


class HandlerFailure(BaseModel):
    """Record of a handler that raised while processing an envelope.

    Produced by the router and handed to the reporting collaborator.
    The original exception is never re-raised out of ``route()``.
    """

    model_config = ConfigDict(frozen=True)

    envelope_id: str
    event_type: EventType
    routing_key: str
    handler: str
    error_type: str
    error_message: str
    acked_by: str | None = None  # "handler", "router", or None when no ack was due
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class DispatchResult(BaseModel):
    """The result of ``Router.route()`` for one envelope."""

    model_config = ConfigDict(frozen=True)

    envelope_id: str
    event_type: EventType
    outcome: DispatchOutcome
    handler: str | None = None
    ack_state: AckState = AckState.PENDING
    acked_by: str | None = None  # "handler" or "router"
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """True when the envelope was handled or legitimately unmatched."""
        return self.outcome in (DispatchOutcome.HANDLED, DispatchOutcome.NO_MATCH)

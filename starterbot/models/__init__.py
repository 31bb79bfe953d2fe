"""starterbot data models — all Pydantic v2, all frozen (immutable)."""

from starterbot.models.dispatch import (
    AckState,
    DispatchOutcome,
    DispatchResult,
    HandlerFailure,
)
from starterbot.models.envelopes import (
    ACK_REQUIRED,
    ENVELOPE_TYPE_MAP,
    ActionEnvelope,
    CommandEnvelope,
    EnvelopeBase,
    EventType,
    MessageEnvelope,
    PlatformEventEnvelope,
    ShortcutEnvelope,
    ViewSubmissionEnvelope,
)

__all__ = [
    # envelopes
    "EventType",
    "ACK_REQUIRED",
    "ENVELOPE_TYPE_MAP",
    "EnvelopeBase",
    "CommandEnvelope",
    "MessageEnvelope",
    "ShortcutEnvelope",
    "ViewSubmissionEnvelope",
    "ActionEnvelope",
    "PlatformEventEnvelope",
    # dispatch
    "AckState",
    "DispatchOutcome",
    "DispatchResult",
    "HandlerFailure",
]

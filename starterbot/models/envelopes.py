"""Decoded inbound event envelopes.

Every inbound event reaches the router as one of these frozen Pydantic
models.  The ``event_type`` field is the discriminant; each variant carries
its own required fields so handlers never destructure untyped payloads.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """The six envelope categories the router understands."""

    COMMAND = "command"
    MESSAGE = "message"
    SHORTCUT = "shortcut"
    VIEW_SUBMISSION = "view_submission"
    ACTION = "action"
    EVENT = "event"


# Categories whose upstream transport expects an acknowledgment
ACK_REQUIRED: frozenset[EventType] = frozenset(
    {
        EventType.COMMAND,
        EventType.SHORTCUT,
        EventType.VIEW_SUBMISSION,
        EventType.ACTION,
    }
)


class EnvelopeBase(BaseModel):
    """Fields shared by every envelope.

    ``raw`` holds the original platform payload.  The router never reads it;
    it is kept so handlers can reach fields the typed variants do not model.
    """

    model_config = ConfigDict(frozen=True)

    envelope_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: EventType
    raw: dict[str, Any] = {}
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def requires_ack(self) -> bool:
        """Whether the transport must receive an acknowledgment."""
        return self.event_type in ACK_REQUIRED

    @property
    def routing_key(self) -> str:
        """The field value the router matches registrations against."""
        raise NotImplementedError

    def reply_target(self) -> str | None:
        """Channel or user id replies are posted to, if any."""
        return None


class CommandEnvelope(EnvelopeBase):
    """A slash command invocation such as ``/greet``."""

    event_type: EventType = EventType.COMMAND
    name: str
    args: str = ""
    user_id: str | None = None
    channel_id: str | None = None

    @property
    def routing_key(self) -> str:
        return self.name

    def reply_target(self) -> str | None:
        return self.channel_id or self.user_id


class MessageEnvelope(EnvelopeBase):
    """A plain text message posted in a channel the bot can see."""

    event_type: EventType = EventType.MESSAGE
    text: str
    author_id: str
    channel_id: str
    ts: str | None = None

    @property
    def routing_key(self) -> str:
        return self.text

    def reply_target(self) -> str | None:
        return self.channel_id


class ShortcutEnvelope(EnvelopeBase):
    """A global or message shortcut trigger.

    Message shortcuts additionally carry the channel and timestamp of the
    message they were invoked on.
    """

    event_type: EventType = EventType.SHORTCUT
    callback_id: str
    trigger_id: str
    invoker_id: str
    shortcut_kind: Literal["global", "message"] = "global"
    channel_id: str | None = None
    channel_name: str | None = None
    message_ts: str | None = None

    @property
    def routing_key(self) -> str:
        return self.callback_id

    def reply_target(self) -> str | None:
        return self.invoker_id


class ViewSubmissionEnvelope(EnvelopeBase):
    """Submission of a modal view's form."""

    event_type: EventType = EventType.VIEW_SUBMISSION
    callback_id: str
    view_id: str
    submitter_id: str
    values: dict[str, Any] = {}

    @property
    def routing_key(self) -> str:
        return self.callback_id

    def reply_target(self) -> str | None:
        return self.submitter_id


class ActionEnvelope(EnvelopeBase):
    """An interactive element click inside a message or a view."""

    event_type: EventType = EventType.ACTION
    action_id: str
    view_id: str | None = None
    user_id: str | None = None
    channel_id: str | None = None
    trigger_id: str | None = None
    value: str | None = None

    @property
    def routing_key(self) -> str:
        return self.action_id

    def reply_target(self) -> str | None:
        return self.channel_id or self.user_id


class PlatformEventEnvelope(EnvelopeBase):
    """A generic platform event (e.g. ``app_home_opened``)."""

    event_type: EventType = EventType.EVENT
    name: str
    user_id: str | None = None
    channel_id: str | None = None

    @property
    def routing_key(self) -> str:
        return self.name

    def reply_target(self) -> str | None:
        return self.channel_id or self.user_id


# Registry for deserialization by event_type
ENVELOPE_TYPE_MAP: dict[EventType, type[EnvelopeBase]] = {
    EventType.COMMAND: CommandEnvelope,
    EventType.MESSAGE: MessageEnvelope,
    EventType.SHORTCUT: ShortcutEnvelope,
    EventType.VIEW_SUBMISSION: ViewSubmissionEnvelope,
    EventType.ACTION: ActionEnvelope,
    EventType.EVENT: PlatformEventEnvelope,
}

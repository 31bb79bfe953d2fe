"""Handler context — what a handler sees when its registration matches."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starterbot.core.acknowledgment import AckTracker
from starterbot.models.envelopes import EnvelopeBase

if TYPE_CHECKING:
    from starterbot.client import MessagingClient


class ReplyTargetError(RuntimeError):
    """Raised when ``reply()`` cannot determine where to post."""


class HandlerContext:
    """Normalized view of one dispatch, passed to the matched handler.

    Envelope fields are reachable through ``context.envelope``; attribute
    access on the context itself also falls through to the envelope, so
    ``context.text`` and ``context.envelope.text`` are equivalent.
    """

    def __init__(
        self,
        envelope: EnvelopeBase,
        tracker: AckTracker,
        client: MessagingClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self.envelope = envelope
        self.client = client
        self.logger = logger or logging.getLogger("starterbot.handlers")
        self._tracker = tracker

    def __getattr__(self, name: str) -> Any:
        # Only called for names not found on the context itself
        if name.startswith("_") or name == "envelope":
            raise AttributeError(name)
        return getattr(self.envelope, name)

    def acknowledge(self, response: Any = None) -> None:
        """Acknowledge the envelope to the transport (at most once)."""
        self._tracker.acknowledge(response, by="handler")

    # Shorter alias matching the platform SDK's naming
    ack = acknowledge

    def reply(self, content: str, **extra: Any) -> Any:
        """Post *content* to the envelope's reply target.

        A thin pass-through to ``client.post_message``; not retried.
        """
        target = self.envelope.reply_target()
        if not target:
            raise ReplyTargetError(
                f"{self.envelope.event_type.value} envelope"
                f" {self.envelope.envelope_id} has no reply target"
            )
        return self.client.post_message(target, content, **extra)

    say = reply

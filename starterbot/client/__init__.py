"""Outbound messaging client — the protocol handlers post through.

The router does not wrap or retry these calls; handlers call the client
directly (``context.client``) or through ``context.reply()``.
``RecordingClient`` is an in-memory implementation used by the CLI demo and
the test-suite.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from starterbot.client.recording import (
    OpenViewPayload,
    PostMessagePayload,
    RecordingClient,
    UpdateViewPayload,
)


@runtime_checkable
class MessagingClient(Protocol):
    """Protocol every outbound messaging client must implement."""

    def post_message(self, target: str, content: str, **extra: Any) -> dict[str, Any]:
        """Post *content* to a channel or user id."""
        ...

    def open_view(self, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        """Open a modal view; the response carries the new view's id."""
        ...

    def update_view(self, view_id: str, view: dict[str, Any]) -> dict[str, Any]:
        """Replace the contents of an open view."""
        ...

    def get_permalink(self, channel_id: str, message_ts: str) -> str:
        """Return a permanent link to a message."""
        ...


__all__ = [
    "MessagingClient",
    "RecordingClient",
    "PostMessagePayload",
    "OpenViewPayload",
    "UpdateViewPayload",
]

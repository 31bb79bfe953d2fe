"""In-memory messaging client — records outbound calls instead of sending.

This client does NOT send HTTP requests.  It builds typed payloads for each
call and stores them in a buffer for later retrieval by the CLI or a test
harness.  Views opened through it receive sequential ids and can be updated
by id afterwards, mirroring the platform's view lifecycle.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class PostMessagePayload(BaseModel):
    """A ``chat.postMessage`` call."""

    model_config = ConfigDict(frozen=True)

    channel: str
    text: str
    extra: dict[str, Any] = {}


class OpenViewPayload(BaseModel):
    """A ``views.open`` call."""

    model_config = ConfigDict(frozen=True)

    trigger_id: str
    view_id: str
    view: dict[str, Any]


class UpdateViewPayload(BaseModel):
    """A ``views.update`` call."""

    model_config = ConfigDict(frozen=True)

    view_id: str
    view: dict[str, Any]


OutboundPayload = PostMessagePayload | OpenViewPayload | UpdateViewPayload


class ViewNotFoundError(KeyError):
    """Raised when updating a view id this client never opened."""


class RecordingClient:
    """Records outbound calls in memory.

    Parameters
    ----------
    workspace_url:
        Base URL used to build permalinks.
    """

    def __init__(self, workspace_url: str = "https://example.slack.com") -> None:
        self._workspace_url = workspace_url.rstrip("/")
        self._pending: list[OutboundPayload] = []
        self._views: dict[str, dict[str, Any]] = {}
        self._view_ids = itertools.count(1)
        self._message_ts = itertools.count(1)

    # ------------------------------------------------------------------
    # MessagingClient protocol
    # ------------------------------------------------------------------

    def post_message(self, target: str, content: str, **extra: Any) -> dict[str, Any]:
        payload = PostMessagePayload(channel=target, text=content, extra=extra)
        self._pending.append(payload)
        ts = f"{1700000000 + next(self._message_ts)}.000100"
        logger.debug("RecordingClient: queued message to %s", target)
        return {"ok": True, "channel": target, "ts": ts}

    def open_view(self, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        view_id = f"V{next(self._view_ids):04d}"
        self._views[view_id] = view
        self._pending.append(OpenViewPayload(trigger_id=trigger_id, view_id=view_id, view=view))
        logger.debug("RecordingClient: opened view %s for trigger %s", view_id, trigger_id)
        return {"ok": True, "view": {"id": view_id, **view}}

    def update_view(self, view_id: str, view: dict[str, Any]) -> dict[str, Any]:
        if view_id not in self._views:
            raise ViewNotFoundError(view_id)
        self._views[view_id] = view
        self._pending.append(UpdateViewPayload(view_id=view_id, view=view))
        logger.debug("RecordingClient: updated view %s", view_id)
        return {"ok": True, "view": {"id": view_id, **view}}

    def get_permalink(self, channel_id: str, message_ts: str) -> str:
        return f"{self._workspace_url}/archives/{channel_id}/p{message_ts.replace('.', '')}"

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def view(self, view_id: str) -> dict[str, Any]:
        """Return the current contents of an opened view."""
        try:
            return self._views[view_id]
        except KeyError:
            raise ViewNotFoundError(view_id) from None

    @property
    def messages(self) -> list[PostMessagePayload]:
        return [p for p in self._pending if isinstance(p, PostMessagePayload)]

    @property
    def pending_count(self) -> int:
        """Return the number of pending payloads."""
        return len(self._pending)

    def flush(self) -> list[OutboundPayload]:
        """Return and clear all pending payloads."""
        payloads = list(self._pending)
        self._pending.clear()
        return payloads

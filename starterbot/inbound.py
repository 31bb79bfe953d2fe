"""Inbound payload decoding — raw platform payloads to typed envelopes.

The transport layer verifies request signatures and parses the HTTP body;
this module turns the resulting dict into exactly one envelope variant.

Payload shapes handled (per the platform's published interaction schema):

* slash commands — flat form fields (``command``, ``text``, ``user_id``,
  ``channel_id``, ``trigger_id``);
* ``event_callback`` — the event lives under ``event``; plain ``message``
  events become ``MessageEnvelope``, everything else a platform event;
* ``shortcut`` — global shortcut, invoker under ``user``;
* ``message_action`` — message shortcut; ``channel`` and ``message`` are
  top-level objects on the payload, not nested under the shortcut;
* ``view_submission`` — the submitted view (id, callback id, state) under
  ``view``;
* ``block_actions`` — the clicked elements under ``actions``; when fired
  inside a modal the view is the top-level ``view`` object.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from starterbot.core.codec import EnvelopeValidationError
from starterbot.models.envelopes import (
    ActionEnvelope,
    CommandEnvelope,
    EnvelopeBase,
    MessageEnvelope,
    PlatformEventEnvelope,
    ShortcutEnvelope,
    ViewSubmissionEnvelope,
)

logger = logging.getLogger(__name__)


def _id(obj: Any) -> str | None:
    """Return ``obj["id"]`` for nested ``{"id": ...}`` objects, else None."""
    if isinstance(obj, dict):
        value = obj.get("id")
        return str(value) if value is not None else None
    return None


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _require(payload: dict[str, Any], *path: str) -> Any:
    node: Any = payload
    for key in path:
        if not isinstance(node, dict) or node.get(key) in (None, ""):
            raise EnvelopeValidationError(
                f"Payload is missing required field {'.'.join(path)!r}"
            )
        node = node[key]
    return node


def decode_payload(payload: dict[str, Any]) -> EnvelopeBase:
    """Decode one platform payload into an envelope.

    Raises
    ------
    EnvelopeValidationError
        If the payload type is unsupported, a required field is missing,
        or a field has the wrong type.
    """
    if not isinstance(payload, dict):
        raise EnvelopeValidationError(
            f"Payload must be an object, got {type(payload).__name__}"
        )

    if "command" in payload and "type" not in payload:
        kind: Any = "slash_command"
        decoder: Callable[[dict[str, Any]], EnvelopeBase] | None = _decode_command
    else:
        kind = payload.get("type")
        decoder = _DECODERS.get(kind) if isinstance(kind, str) else None
    if decoder is None:
        raise EnvelopeValidationError(f"Unsupported payload type: {kind!r}")
    try:
        envelope = decoder(payload)
    except ValidationError as exc:
        raise EnvelopeValidationError(
            f"{kind} payload has invalid fields: {exc}"
        ) from exc
    logger.debug("Decoded %s payload into %s envelope", kind, envelope.event_type.value)
    return envelope


def _decode_command(payload: dict[str, Any]) -> CommandEnvelope:
    return CommandEnvelope(
        name=_require(payload, "command"),
        args=payload.get("text") or "",
        user_id=payload.get("user_id"),
        channel_id=payload.get("channel_id"),
        raw=payload,
    )


def _decode_event_callback(payload: dict[str, Any]) -> EnvelopeBase:
    event = _require(payload, "event")
    event_name = _require(payload, "event", "type")

    if event_name == "message" and not event.get("subtype") and not event.get("bot_id"):
        return MessageEnvelope(
            text=event.get("text") or "",
            author_id=_require(payload, "event", "user"),
            channel_id=_require(payload, "event", "channel"),
            ts=event.get("ts"),
            raw=payload,
        )

    name = f"message.{event['subtype']}" if event.get("subtype") else event_name
    user = event.get("user")
    return PlatformEventEnvelope(
        name=name,
        user_id=user if isinstance(user, str) else _id(user),
        channel_id=event.get("channel") if isinstance(event.get("channel"), str) else None,
        raw=payload,
    )


def _decode_shortcut(payload: dict[str, Any]) -> ShortcutEnvelope:
    return ShortcutEnvelope(
        callback_id=_require(payload, "callback_id"),
        trigger_id=_require(payload, "trigger_id"),
        invoker_id=_require(payload, "user", "id"),
        shortcut_kind="global",
        raw=payload,
    )


def _decode_message_action(payload: dict[str, Any]) -> ShortcutEnvelope:
    channel = _obj(payload.get("channel"))
    return ShortcutEnvelope(
        callback_id=_require(payload, "callback_id"),
        trigger_id=_require(payload, "trigger_id"),
        invoker_id=_require(payload, "user", "id"),
        shortcut_kind="message",
        channel_id=_require(payload, "channel", "id"),
        channel_name=channel.get("name"),
        message_ts=_require(payload, "message", "ts"),
        raw=payload,
    )


def _decode_view_submission(payload: dict[str, Any]) -> ViewSubmissionEnvelope:
    state = _obj(_obj(payload.get("view")).get("state"))
    return ViewSubmissionEnvelope(
        callback_id=_require(payload, "view", "callback_id"),
        view_id=_require(payload, "view", "id"),
        submitter_id=_require(payload, "user", "id"),
        values=state.get("values") or {},
        raw=payload,
    )


def _decode_block_actions(payload: dict[str, Any]) -> ActionEnvelope:
    actions = payload.get("actions") or []
    if not isinstance(actions, list) or not actions:
        raise EnvelopeValidationError("block_actions payload carries no actions")
    if not all(isinstance(action, dict) for action in actions):
        raise EnvelopeValidationError("block_actions entries must be objects")
    if len(actions) > 1:
        logger.warning("block_actions payload carries %d actions; routing the first", len(actions))
    action = actions[0]
    if not action.get("action_id"):
        raise EnvelopeValidationError("Payload is missing required field 'actions.0.action_id'")
    return ActionEnvelope(
        action_id=action["action_id"],
        view_id=_id(payload.get("view")),
        user_id=_id(payload.get("user")),
        channel_id=_id(payload.get("channel")),
        trigger_id=payload.get("trigger_id"),
        value=action.get("value"),
        raw=payload,
    )


_DECODERS = {
    "event_callback": _decode_event_callback,
    "shortcut": _decode_shortcut,
    "message_action": _decode_message_action,
    "view_submission": _decode_view_submission,
    "block_actions": _decode_block_actions,
}

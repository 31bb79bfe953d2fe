"""Registry table — the handler registrations the router dispatches to.

Keyed categories (command, shortcut, view submission, action, event) hold at
most one registration per key; duplicates are rejected, never overwritten.
Message registrations are an ordered list scanned first-match-wins.

The table is built once during startup and frozen before dispatch begins.
After ``freeze()`` it is read-only, so concurrent lookups need no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from starterbot.core.matchers import Matcher
from starterbot.models.envelopes import EventType

if TYPE_CHECKING:
    from starterbot.core.context import HandlerContext

logger = logging.getLogger(__name__)

Handler = Callable[["HandlerContext"], Any]

KEYED_TYPES: tuple[EventType, ...] = (
    EventType.COMMAND,
    EventType.SHORTCUT,
    EventType.VIEW_SUBMISSION,
    EventType.ACTION,
    EventType.EVENT,
)


class RegistrationError(ValueError):
    """Base class for errors raised while building the registry."""


class DuplicateRegistrationError(RegistrationError):
    """Raised when a keyed registration reuses an existing key."""

    def __init__(self, event_type: EventType, key: str) -> None:
        self.event_type = event_type
        self.key = key
        super().__init__(
            f"A {event_type.value} handler is already registered for {key!r}"
        )


class RegistryFrozenError(RegistrationError):
    """Raised when registering after dispatch has begun."""


class HandlerRegistration(BaseModel):
    """One handler bound to either a key or a message matcher."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    event_type: EventType
    handler: Callable[..., Any]
    key: str | None = None
    matcher: Matcher | None = None

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))

    @property
    def description(self) -> str:
        if self.matcher is not None:
            return self.matcher.description
        return self.key or ""


class RegistryTable:
    """Holds every registration, grouped by event category."""

    def __init__(self) -> None:
        self._keyed: dict[EventType, dict[str, HandlerRegistration]] = {
            event_type: {} for event_type in KEYED_TYPES
        }
        self._messages: list[HandlerRegistration] = []
        self._frozen = False

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_keyed(self, event_type: EventType, key: str, handler: Handler) -> HandlerRegistration:
        """Register *handler* under *key* for a keyed category.

        Raises
        ------
        DuplicateRegistrationError
            If *key* is already registered for *event_type*.  The table is
            left unchanged.
        RegistryFrozenError
            If the table has been frozen.
        """
        self._check_mutable()
        if event_type not in self._keyed:
            raise RegistrationError(
                f"{event_type.value} registrations are not keyed"
            )
        bucket = self._keyed[event_type]
        if key in bucket:
            raise DuplicateRegistrationError(event_type, key)
        registration = HandlerRegistration(event_type=event_type, handler=handler, key=key)
        bucket[key] = registration
        logger.info(
            "Registered %s handler %s for %r",
            event_type.value, registration.name, key,
        )
        return registration

    def add_message(self, matcher: Matcher, handler: Handler) -> HandlerRegistration:
        """Append a message registration; order of calls is match order."""
        self._check_mutable()
        registration = HandlerRegistration(
            event_type=EventType.MESSAGE, handler=handler, matcher=matcher
        )
        self._messages.append(registration)
        logger.info(
            "Registered message handler %s for %s",
            registration.name, matcher.description,
        )
        return registration

    def freeze(self) -> None:
        """Make the table read-only.  Idempotent."""
        if not self._frozen:
            self._frozen = True
            logger.debug("Registry frozen with %d registrations", len(self))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                "Registry is frozen; register handlers before dispatch begins"
            )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, event_type: EventType, key: str) -> HandlerRegistration | None:
        """Return the registration for *key*, or None.

        Keyed categories use an exact dictionary lookup; messages are
        scanned in registration order and the first accepting matcher wins.
        """
        if event_type == EventType.MESSAGE:
            for registration in self._messages:
                if registration.matcher is not None and registration.matcher.matches(key):
                    return registration
            return None
        return self._keyed.get(event_type, {}).get(key)

    def registrations(self, event_type: EventType | None = None) -> list[HandlerRegistration]:
        """Return registrations, optionally filtered by category."""
        types = [event_type] if event_type else list(EventType)
        result: list[HandlerRegistration] = []
        for et in types:
            if et == EventType.MESSAGE:
                result.extend(self._messages)
            else:
                result.extend(self._keyed.get(et, {}).values())
        return result

    def __len__(self) -> int:
        return len(self._messages) + sum(len(b) for b in self._keyed.values())

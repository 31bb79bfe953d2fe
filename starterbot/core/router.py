"""Event router — the central dispatcher for inbound envelopes.

The Router owns the RegistryTable, matches each envelope to zero or one
registration, invokes the handler with a ``HandlerContext``, and enforces
the acknowledgment contract:

* an envelope that matches nothing is a normal ``no_match`` outcome and is
  neither handled nor acknowledged;
* an envelope that requires acknowledgment is acknowledged exactly once,
  by the handler or else by the router right after the handler returns;
* a handler that raises is still acknowledged, its failure is reported to
  the reporting collaborator, and ``route()`` returns normally;
* a coroutine handler is awaited to completion before the router's own
  acknowledgment, never pre-empted.

``route()`` never raises for per-envelope problems, so one bad envelope
cannot take down the dispatch loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

from starterbot.client import MessagingClient, RecordingClient
from starterbot.core.acknowledgment import (
    DEFAULT_ACK_TIMEOUT_SECONDS,
    Acknowledger,
    AcknowledgmentError,
    AckTracker,
    NullAcknowledger,
)
from starterbot.core.context import HandlerContext
from starterbot.core.matchers import Matcher, StringMatchMode, to_matcher
from starterbot.core.registry import Handler, HandlerRegistration, RegistryTable
from starterbot.models.dispatch import (
    AckState,
    DispatchOutcome,
    DispatchResult,
    HandlerFailure,
)
from starterbot.models.envelopes import EnvelopeBase, EventType
from starterbot.reporting.dispatcher import ReportDispatcher, ReportDispatchError
from starterbot.reporting.reporters import LocalFileReporter, LogReporter

if TYPE_CHECKING:
    from starterbot.config import BotConfig

logger = logging.getLogger(__name__)


class Router:
    """Command & event router.

    Parameters
    ----------
    client:
        Outbound messaging client handed to handlers.  Defaults to an
        in-memory ``RecordingClient``.
    acknowledger:
        Transport acknowledger.  Defaults to ``NullAcknowledger``.
    reporter:
        Failure reporting fan-out.  Defaults to a dispatcher holding a
        single ``LogReporter``.
    ack_timeout_seconds:
        Platform acknowledgment deadline, measured from ``received_at``.
    string_match_mode:
        How plain-string message matchers compare: ``"contains"`` or
        ``"equals"``.
    """

    def __init__(
        self,
        client: MessagingClient | None = None,
        acknowledger: Acknowledger | None = None,
        reporter: ReportDispatcher | None = None,
        *,
        ack_timeout_seconds: float = DEFAULT_ACK_TIMEOUT_SECONDS,
        string_match_mode: StringMatchMode = "contains",
    ) -> None:
        if client is None:
            client = RecordingClient()
        if reporter is None:
            reporter = ReportDispatcher([LogReporter()])

        self.client = client
        self.registry = RegistryTable()
        self._acknowledger = acknowledger or NullAcknowledger()
        self._reporter = reporter
        self._ack_timeout = ack_timeout_seconds
        self._string_match_mode = string_match_mode

    @classmethod
    def from_config(
        cls,
        config: BotConfig,
        client: MessagingClient | None = None,
        acknowledger: Acknowledger | None = None,
    ) -> Router:
        """Build a router from ``BotConfig`` settings."""
        reporter = ReportDispatcher([LogReporter()])
        if config.failure_report_dir is not None:
            reporter.add(LocalFileReporter(config.failure_report_dir))
        return cls(
            client=client,
            acknowledger=acknowledger,
            reporter=reporter,
            ack_timeout_seconds=config.ack_timeout_seconds,
            string_match_mode=config.message_match_mode,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_command(self, name: str, handler: Handler) -> HandlerRegistration:
        """Register a slash command handler (e.g. ``"/greet"``)."""
        return self.registry.add_keyed(EventType.COMMAND, name, handler)

    def register_message(
        self, matcher: str | re.Pattern[str] | Matcher, handler: Handler
    ) -> HandlerRegistration:
        """Register a message handler.  Earlier registrations win ties."""
        return self.registry.add_message(
            to_matcher(matcher, self._string_match_mode), handler
        )

    def register_shortcut(self, callback_id: str, handler: Handler) -> HandlerRegistration:
        return self.registry.add_keyed(EventType.SHORTCUT, callback_id, handler)

    def register_view_submission(self, callback_id: str, handler: Handler) -> HandlerRegistration:
        return self.registry.add_keyed(EventType.VIEW_SUBMISSION, callback_id, handler)

    def register_action(self, action_id: str, handler: Handler) -> HandlerRegistration:
        return self.registry.add_keyed(EventType.ACTION, action_id, handler)

    def register_event(self, name: str, handler: Handler) -> HandlerRegistration:
        """Register a generic platform event handler (e.g. ``"app_home_opened"``)."""
        return self.registry.add_keyed(EventType.EVENT, name, handler)

    # Decorator forms -----------------------------------------------------

    def command(self, name: str) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_command, name)

    def message(self, matcher: str | re.Pattern[str] | Matcher) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_message, matcher)

    def shortcut(self, callback_id: str) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_shortcut, callback_id)

    def view(self, callback_id: str) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_view_submission, callback_id)

    def action(self, action_id: str) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_action, action_id)

    def event(self, name: str) -> Callable[[Handler], Handler]:
        return self._decorator(self.register_event, name)

    @staticmethod
    def _decorator(register: Callable[..., Any], key: Any) -> Callable[[Handler], Handler]:
        def wrap(handler: Handler) -> Handler:
            register(key, handler)
            return handler

        return wrap

    def freeze(self) -> None:
        """Close registration.  ``route()`` does this implicitly."""
        self.registry.freeze()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def route(self, envelope: EnvelopeBase) -> DispatchResult:
        """Dispatch one envelope to its matching handler.

        Coroutine handlers are run to completion on a fresh event loop.
        Call ``aroute()`` instead when already inside a running loop.

        Returns a ``DispatchResult``; never raises for handler or
        acknowledgment failures.
        """
        started = time.monotonic()
        match = self._match(envelope)
        if match is None:
            return self._no_match(envelope, started)

        registration, tracker, context = match
        handler_error: Exception | None = None
        try:
            returned = registration.handler(context)
            if inspect.isawaitable(returned):
                _run_to_completion(returned, registration.name)
        except Exception as exc:  # noqa: BLE001
            handler_error = exc
        return self._complete(envelope, registration, tracker, handler_error, started)

    async def aroute(self, envelope: EnvelopeBase) -> DispatchResult:
        """Dispatch one envelope from inside a running event loop.

        Same contract as ``route()``; coroutine handlers are awaited on the
        caller's loop and plain handlers are called directly.
        """
        started = time.monotonic()
        match = self._match(envelope)
        if match is None:
            return self._no_match(envelope, started)

        registration, tracker, context = match
        handler_error: Exception | None = None
        try:
            returned = registration.handler(context)
            if inspect.isawaitable(returned):
                await returned
        except Exception as exc:  # noqa: BLE001
            handler_error = exc
        return self._complete(envelope, registration, tracker, handler_error, started)

    def route_batch(self, envelopes: Iterable[EnvelopeBase]) -> dict[str, DispatchResult]:
        """Route multiple envelopes independently, keyed by envelope_id."""
        return {envelope.envelope_id: self.route(envelope) for envelope in envelopes}

    # ------------------------------------------------------------------
    # Dispatch steps
    # ------------------------------------------------------------------

    def _match(
        self, envelope: EnvelopeBase
    ) -> tuple[HandlerRegistration, AckTracker, HandlerContext] | None:
        self.registry.freeze()
        registration = self.registry.lookup(envelope.event_type, envelope.routing_key)
        if registration is None:
            return None
        tracker = AckTracker(envelope, self._acknowledger, self._ack_timeout)
        return registration, tracker, HandlerContext(envelope, tracker, self.client)

    def _no_match(self, envelope: EnvelopeBase, started: float) -> DispatchResult:
        logger.debug(
            "No %s handler for %r (envelope %s)",
            envelope.event_type.value,
            envelope.routing_key,
            envelope.envelope_id,
        )
        return DispatchResult(
            envelope_id=envelope.envelope_id,
            event_type=envelope.event_type,
            outcome=DispatchOutcome.NO_MATCH,
            duration_ms=_elapsed_ms(started),
        )

    def _complete(
        self,
        envelope: EnvelopeBase,
        registration: HandlerRegistration,
        tracker: AckTracker,
        handler_error: Exception | None,
        started: float,
    ) -> DispatchResult:
        """Issue the outstanding acknowledgment and build the result."""
        if tracker.required and tracker.state == AckState.PENDING:
            try:
                tracker.acknowledge(by="router")
            except AcknowledgmentError:
                pass  # recorded on the tracker

        ack_error = tracker.error
        if handler_error is not None and handler_error is ack_error:
            # The handler's own acknowledge() failed and it let that propagate
            handler_error = None

        if handler_error is not None:
            self._report_failure(envelope, registration, tracker, handler_error)

        if ack_error is not None:
            logger.warning(
                "Acknowledgment failed for %s envelope %s: %s",
                envelope.event_type.value,
                envelope.envelope_id,
                ack_error,
            )
            outcome = DispatchOutcome.ACK_FAILED
            error = str(ack_error)
        elif handler_error is not None:
            outcome = DispatchOutcome.HANDLER_FAILED
            error = f"{type(handler_error).__name__}: {handler_error}"
        else:
            outcome = DispatchOutcome.HANDLED
            error = None

        logger.debug(
            "Routed %s envelope %s to %s: %s",
            envelope.event_type.value,
            envelope.envelope_id,
            registration.name,
            outcome.value,
        )
        return DispatchResult(
            envelope_id=envelope.envelope_id,
            event_type=envelope.event_type,
            outcome=outcome,
            handler=registration.name,
            ack_state=tracker.state,
            acked_by=tracker.acked_by,
            error=error,
            duration_ms=_elapsed_ms(started),
        )

    def _report_failure(
        self,
        envelope: EnvelopeBase,
        registration: HandlerRegistration,
        tracker: AckTracker,
        exc: Exception,
    ) -> None:
        logger.debug("Handler %s raised", registration.name, exc_info=exc)
        failure = HandlerFailure(
            envelope_id=envelope.envelope_id,
            event_type=envelope.event_type,
            routing_key=envelope.routing_key,
            handler=registration.name,
            error_type=type(exc).__name__,
            error_message=str(exc),
            acked_by=tracker.acked_by,
        )
        try:
            self._reporter.dispatch(failure)
        except ReportDispatchError as report_exc:
            logger.error("Failure for envelope %s went unreported: %s",
                         envelope.envelope_id, report_exc)


class AsyncHandlerError(RuntimeError):
    """Raised when a coroutine handler is routed with ``route()`` inside a running loop."""


def _run_to_completion(awaitable: Awaitable[Any], handler_name: str) -> Any:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await(awaitable))
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    raise AsyncHandlerError(
        f"Coroutine handler {handler_name} cannot run inside an active event"
        " loop; dispatch with aroute()"
    )


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)

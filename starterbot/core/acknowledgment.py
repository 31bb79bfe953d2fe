"""Acknowledgment contract — exactly one acknowledgment per envelope.

The upstream platform redelivers any event that is not acknowledged within
its deadline, so every envelope that requires acknowledgment must reach
``AckState.ACKNOWLEDGED`` exactly once.  ``AckTracker`` guards the transport
acknowledger: it is called at most once no matter who asks, and a late or
failing call is recorded rather than raised out of the router.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from starterbot.models.dispatch import AckState
from starterbot.models.envelopes import EnvelopeBase

logger = logging.getLogger(__name__)

DEFAULT_ACK_TIMEOUT_SECONDS = 3.0


class AcknowledgmentError(RuntimeError):
    """Raised when the transport acknowledgment call fails."""


class AcknowledgmentTimeoutError(AcknowledgmentError):
    """Acknowledgment did not complete before the deadline.

    Recorded on the tracker when a successful transport call lands late;
    raised by transports that know the deadline has already passed.
    """


class AlreadyAcknowledgedError(AcknowledgmentError):
    """Raised when a handler acknowledges the same envelope twice."""


@runtime_checkable
class Acknowledger(Protocol):
    """Transport-side callable that tells the platform an event arrived.

    Transports may raise ``AcknowledgmentTimeoutError`` themselves when they
    know the deadline has already passed.
    """

    def __call__(self, envelope: EnvelopeBase, response: Any = None) -> None:
        ...


class NullAcknowledger:
    """Acknowledger that only logs; used when no transport is attached."""

    def __call__(self, envelope: EnvelopeBase, response: Any = None) -> None:
        logger.debug("ack %s (no transport attached)", envelope.envelope_id)


class RecordingAcknowledger:
    """Acknowledger that remembers every acknowledged envelope id."""

    def __init__(self) -> None:
        self.acked: list[str] = []

    def __call__(self, envelope: EnvelopeBase, response: Any = None) -> None:
        self.acked.append(envelope.envelope_id)

    def count(self, envelope_id: str) -> int:
        return self.acked.count(envelope_id)


class AckTracker:
    """Tracks the acknowledgment state of a single envelope.

    Parameters
    ----------
    envelope:
        The envelope being dispatched.
    acknowledger:
        The transport acknowledger.  Called at most once.
    timeout_seconds:
        Deadline measured from ``envelope.received_at``.
    """

    def __init__(
        self,
        envelope: EnvelopeBase,
        acknowledger: Acknowledger,
        timeout_seconds: float = DEFAULT_ACK_TIMEOUT_SECONDS,
    ) -> None:
        self._envelope = envelope
        self._acknowledger = acknowledger
        self._timeout = timeout_seconds
        self._state = AckState.PENDING
        self._acked_by: str | None = None
        self._error: AcknowledgmentError | None = None

    @property
    def state(self) -> AckState:
        return self._state

    @property
    def acked_by(self) -> str | None:
        return self._acked_by

    @property
    def error(self) -> AcknowledgmentError | None:
        """The failure recorded by the acknowledgment attempt, if any."""
        return self._error

    @property
    def required(self) -> bool:
        return self._envelope.requires_ack

    def acknowledge(self, response: Any = None, *, by: str = "handler") -> None:
        """Acknowledge the envelope.

        A no-op for categories that do not require acknowledgment.  The
        state moves to ACKNOWLEDGED before the transport is called, so a
        failing transport call is never attempted a second time.

        Raises
        ------
        AlreadyAcknowledgedError
            If the envelope was already acknowledged.
        AcknowledgmentError
            If the transport call failed.  A call that succeeds past the
            deadline is not raised; it is recorded on ``error`` as an
            ``AcknowledgmentTimeoutError``.
        """
        if not self.required:
            logger.debug(
                "%s envelopes need no acknowledgment; ignoring",
                self._envelope.event_type.value,
            )
            return
        if self._state == AckState.ACKNOWLEDGED:
            raise AlreadyAcknowledgedError(
                f"Envelope {self._envelope.envelope_id} was already acknowledged"
                f" by the {self._acked_by}"
            )

        self._state = AckState.ACKNOWLEDGED
        self._acked_by = by
        started = time.monotonic()
        try:
            self._acknowledger(self._envelope, response)
        except AcknowledgmentError as exc:
            self._error = exc
            raise
        except Exception as exc:
            self._error = AcknowledgmentError(f"Acknowledgment failed: {exc}")
            raise self._error from exc

        # Transport accepted the ack: lateness is only recorded on the tracker
        if self._past_deadline():
            self._error = AcknowledgmentTimeoutError(
                f"Envelope {self._envelope.envelope_id} acknowledged after the"
                f" {self._timeout:.1f}s deadline"
                f" (ack call took {int((time.monotonic() - started) * 1000)}ms)"
            )

    def _past_deadline(self) -> bool:
        elapsed = datetime.now(timezone.utc) - self._envelope.received_at
        return elapsed.total_seconds() > self._timeout

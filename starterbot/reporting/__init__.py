"""Handler failure reporting.

The router turns every handler exception into a ``HandlerFailure`` record
and passes it to a ``ReportDispatcher``; each ``BaseReporter`` decides where
the record goes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from starterbot.models.dispatch import HandlerFailure


@runtime_checkable
class BaseReporter(Protocol):
    """Destination for handler failure records."""

    @property
    def reporter_name(self) -> str:
        """Short name used in log lines, e.g. ``"log"``."""
        ...

    def report(self, failure: HandlerFailure) -> None:
        """Record *failure*.  May raise; the dispatcher carries on without it."""
        ...

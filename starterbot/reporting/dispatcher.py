"""Failure fan-out from the router to the configured reporters."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from starterbot.models.dispatch import HandlerFailure

if TYPE_CHECKING:
    from starterbot.reporting import BaseReporter

logger = logging.getLogger(__name__)


class ReportDispatchError(RuntimeError):
    """Raised when no reporter accepted a handler failure."""


class ReportDispatcher:
    """Hands each ``HandlerFailure`` to every reporter, in the order added.

    A reporter that raises is logged and skipped; the failure only counts as
    lost when none of the reporters accepted it.
    """

    def __init__(self, reporters: Iterable[BaseReporter] = ()) -> None:
        self._reporters: list[BaseReporter] = []
        for reporter in reporters:
            self.add(reporter)

    def add(self, reporter: BaseReporter) -> None:
        if any(existing is reporter for existing in self._reporters):
            return
        self._reporters.append(reporter)
        logger.debug("Handler failures will be reported to %s", reporter.reporter_name)

    def dispatch(self, failure: HandlerFailure) -> list[str]:
        """Report *failure*; return the names of the reporters that took it.

        Raises
        ------
        ReportDispatchError
            If there were reporters and every one of them raised.
        """
        if not self._reporters:
            logger.warning(
                "Handler %s failed on %s %r with no reporter configured",
                failure.handler,
                failure.event_type.value,
                failure.routing_key,
            )
            return []

        accepted: list[str] = []
        problems: list[str] = []
        for reporter in self._reporters:
            try:
                reporter.report(failure)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Reporter %s could not record failure of envelope %s: %s",
                    reporter.reporter_name,
                    failure.envelope_id,
                    exc,
                )
                problems.append(f"{reporter.reporter_name}: {exc}")
            else:
                accepted.append(reporter.reporter_name)

        if not accepted:
            raise ReportDispatchError(
                f"Failure of envelope {failure.envelope_id} was not recorded ("
                + "; ".join(problems)
                + ")"
            )
        return accepted

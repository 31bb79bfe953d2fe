"""Concrete failure reporters — a log line, or one JSON file per failure."""

from __future__ import annotations

import logging
from pathlib import Path

from starterbot.core.codec import canonical_json
from starterbot.models.dispatch import HandlerFailure
from starterbot.models.envelopes import EventType

logger = logging.getLogger(__name__)


class LogReporter:
    """Logs each failure at ERROR level."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    @property
    def reporter_name(self) -> str:
        return "log"

    def report(self, failure: HandlerFailure) -> None:
        self._logger.error(
            "%s handler %s for %r raised %s: %s (envelope %s, acked by %s)",
            failure.event_type.value,
            failure.handler,
            failure.routing_key,
            failure.error_type,
            failure.error_message,
            failure.envelope_id,
            failure.acked_by or "nobody",
        )


class LocalFileReporter:
    """Keeps every failure as ``{base}/{event_type}/{envelope_id}.json``.

    An envelope is dispatched once, so its file is written once; the stored
    records load back as ``HandlerFailure`` models.
    """

    def __init__(self, base_path: Path | str) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def reporter_name(self) -> str:
        return "local_file"

    def path_for(self, failure: HandlerFailure) -> Path:
        return self._base / failure.event_type.value / f"{failure.envelope_id}.json"

    def report(self, failure: HandlerFailure) -> None:
        path = self.path_for(failure)
        path.parent.mkdir(exist_ok=True)
        path.write_bytes(canonical_json(failure))
        logger.debug("Stored failure of %s handler %s at %s",
                     failure.event_type.value, failure.handler, path)

    def stored(self, event_type: EventType | None = None) -> list[HandlerFailure]:
        """Load stored failures, oldest first, optionally for one category."""
        pattern = f"{event_type.value}/*.json" if event_type else "*/*.json"
        failures = [
            HandlerFailure.model_validate_json(path.read_bytes())
            for path in self._base.glob(pattern)
        ]
        return sorted(failures, key=lambda failure: failure.occurred_at)

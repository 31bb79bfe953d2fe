"""Shared test fixtures for starterbot."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from starterbot.client import RecordingClient
from starterbot.core.acknowledgment import RecordingAcknowledger
from starterbot.core.router import Router
from starterbot.models.dispatch import HandlerFailure
from starterbot.models.envelopes import (
    ActionEnvelope,
    CommandEnvelope,
    MessageEnvelope,
    ShortcutEnvelope,
    ViewSubmissionEnvelope,
)
from starterbot.reporting.dispatcher import ReportDispatcher


class CollectingReporter:
    """A reporter that keeps every failure it receives."""

    def __init__(self, name: str = "collecting") -> None:
        self._name = name
        self.failures: list[HandlerFailure] = []

    @property
    def reporter_name(self) -> str:
        return self._name

    def report(self, failure: HandlerFailure) -> None:
        self.failures.append(failure)


@pytest.fixture
def client() -> RecordingClient:
    """Provide a fresh in-memory messaging client."""
    return RecordingClient()


@pytest.fixture
def acknowledger() -> RecordingAcknowledger:
    """Provide an acknowledger that records every ack."""
    return RecordingAcknowledger()


@pytest.fixture
def collecting_reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def router(
    client: RecordingClient,
    acknowledger: RecordingAcknowledger,
    collecting_reporter: CollectingReporter,
) -> Router:
    """Provide an empty Router wired to the recording collaborators."""
    reporter = ReportDispatcher([collecting_reporter])
    return Router(client=client, acknowledger=acknowledger, reporter=reporter)


# ---------------------------------------------------------------------------
# Envelope factories shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_command() -> Callable[..., CommandEnvelope]:
    """Factory fixture: build a CommandEnvelope with sensible defaults."""

    def _factory(name: str = "/greet", **overrides: Any) -> CommandEnvelope:
        defaults: dict[str, Any] = {
            "name": name,
            "user_id": "U1",
            "channel_id": "C1",
        }
        defaults.update(overrides)
        return CommandEnvelope(**defaults)

    return _factory


@pytest.fixture
def make_message() -> Callable[..., MessageEnvelope]:
    """Factory fixture: build a MessageEnvelope with sensible defaults."""

    def _factory(text: str = "hello", **overrides: Any) -> MessageEnvelope:
        defaults: dict[str, Any] = {
            "text": text,
            "author_id": "U1",
            "channel_id": "C1",
        }
        defaults.update(overrides)
        return MessageEnvelope(**defaults)

    return _factory


@pytest.fixture
def make_shortcut() -> Callable[..., ShortcutEnvelope]:
    """Factory fixture: build a ShortcutEnvelope with sensible defaults."""

    def _factory(callback_id: str = "modal_shortcut", **overrides: Any) -> ShortcutEnvelope:
        defaults: dict[str, Any] = {
            "callback_id": callback_id,
            "trigger_id": "T1.abc",
            "invoker_id": "U1",
        }
        defaults.update(overrides)
        return ShortcutEnvelope(**defaults)

    return _factory


@pytest.fixture
def make_action() -> Callable[..., ActionEnvelope]:
    """Factory fixture: build an ActionEnvelope with sensible defaults."""

    def _factory(action_id: str = "change_modal_message", **overrides: Any) -> ActionEnvelope:
        defaults: dict[str, Any] = {"action_id": action_id, "user_id": "U1"}
        defaults.update(overrides)
        return ActionEnvelope(**defaults)

    return _factory


@pytest.fixture
def make_view_submission() -> Callable[..., ViewSubmissionEnvelope]:
    """Factory fixture: build a ViewSubmissionEnvelope with sensible defaults."""

    def _factory(callback_id: str = "modal_shortcut_view", **overrides: Any) -> ViewSubmissionEnvelope:
        defaults: dict[str, Any] = {
            "callback_id": callback_id,
            "view_id": "V0001",
            "submitter_id": "U1",
        }
        defaults.update(overrides)
        return ViewSubmissionEnvelope(**defaults)

    return _factory

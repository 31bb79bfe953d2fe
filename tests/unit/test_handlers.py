"""Tests for the demo handler set and build_router."""

from __future__ import annotations

import pytest

from starterbot.app import build_router
from starterbot.app.handlers import FAREWELL_PATTERN, GREETING, SUBMITTED_TEXT, register_handlers
from starterbot.app.views import CHANGE_MESSAGE_ACTION_ID, MODAL_CALLBACK_ID, MODAL_TITLE
from starterbot.config import BotConfig, ConfigError
from starterbot.core.registry import DuplicateRegistrationError, RegistryFrozenError
from starterbot.models.dispatch import DispatchOutcome
from starterbot.models.envelopes import EventType


@pytest.fixture
def bot(client, acknowledger):
    return build_router(client=client, acknowledger=acknowledger)


class TestBuildRouter:
    def test_registers_every_category(self, bot):
        assert len(bot.registry) == 8
        for event_type in EventType:
            assert bot.registry.registrations(event_type)

    def test_router_is_frozen(self, bot):
        with pytest.raises(RegistryFrozenError):
            bot.register_command("/late", lambda ctx: None)

    def test_registering_twice_rejected(self, router):
        register_handlers(router)
        with pytest.raises(DuplicateRegistrationError):
            register_handlers(router)

    def test_production_guard(self, client):
        with pytest.raises(ConfigError):
            build_router(client=client, config=BotConfig(environment="production"))


class TestDemoHandlers:
    def test_greet(self, bot, client, acknowledger, make_command):
        envelope = make_command("/greet", channel_id="C1")
        result = bot.route(envelope)
        assert result.acked_by == "handler"
        assert acknowledger.count(envelope.envelope_id) == 1
        assert client.messages[0].text == GREETING

    def test_hello(self, bot, client, make_message):
        bot.route(make_message("hello", author_id="U2"))
        assert client.messages[0].text == "Hello, <@U2>!"

    @pytest.mark.parametrize("text", ["bye", "goodbye all", "cya later"])
    def test_farewells(self, bot, client, make_message, text):
        assert FAREWELL_PATTERN.search(text)
        bot.route(make_message(text, author_id="U1"))
        assert client.messages[0].text == "See you later, <@U1>!"

    def test_modal_shortcut_opens_view(self, bot, client, make_shortcut):
        bot.route(make_shortcut("modal_shortcut", trigger_id="T9"))
        (payload,) = client.flush()
        assert payload.trigger_id == "T9"
        assert payload.view["callback_id"] == MODAL_CALLBACK_ID
        assert payload.view["title"]["text"] == MODAL_TITLE

    def test_change_message_outside_view_fails(self, bot, make_action):
        result = bot.route(make_action(CHANGE_MESSAGE_ACTION_ID, view_id=None))
        assert result.outcome == DispatchOutcome.HANDLER_FAILED
        assert "outside of a view" in result.error

    def test_view_submission_dms_submitter(self, bot, client, make_view_submission):
        bot.route(make_view_submission(submitter_id="U3"))
        assert client.messages[0].channel == "U3"
        assert client.messages[0].text == SUBMITTED_TEXT

    def test_message_shortcut_without_message_fails(self, bot, make_shortcut):
        result = bot.route(make_shortcut("message_shortcut"))
        assert result.outcome == DispatchOutcome.HANDLER_FAILED
        assert result.acked_by == "handler"

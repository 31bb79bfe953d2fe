"""Tests for bot config — env-driven settings and the startup guard."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from starterbot.config import BotConfig, ConfigError, configure_logging
from starterbot.core.router import Router
from starterbot.models.envelopes import EventType
from starterbot.reporting.reporters import LocalFileReporter


class TestBotConfig:
    def test_defaults(self):
        config = BotConfig()
        assert config.environment == "development"
        assert config.port == 3000
        assert config.ack_timeout_seconds == 3.0
        assert config.message_match_mode == "contains"
        assert config.failure_report_dir is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("STARTERBOT_PORT", "8080")
        monkeypatch.setenv("STARTERBOT_MESSAGE_MATCH_MODE", "equals")
        config = BotConfig()
        assert config.port == 8080
        assert config.message_match_mode == "equals"

    def test_invalid_match_mode_rejected(self):
        with pytest.raises(ValueError):
            BotConfig(message_match_mode="prefix")  # type: ignore[arg-type]

    def test_is_production_when_set(self):
        assert BotConfig(environment="production").is_production is True
        assert BotConfig().is_production is False


class TestStartupGuard:
    def test_development_needs_no_credentials(self):
        BotConfig().validate_for_startup()

    def test_production_requires_credentials(self):
        config = BotConfig(environment="production", bot_token="", signing_secret="")
        with pytest.raises(ConfigError, match="BOT_TOKEN"):
            config.validate_for_startup()

    def test_production_rejects_debug(self):
        config = BotConfig(
            environment="production", debug=True, bot_token="xoxb-1", signing_secret="s"
        )
        with pytest.raises(ConfigError, match="debug"):
            config.validate_for_startup()

    def test_production_ok(self):
        BotConfig(environment="production", bot_token="xoxb-1", signing_secret="s").validate_for_startup()


class TestRouterFromConfig:
    def test_failure_dir_adds_file_reporter(self, tmp_path: Path, make_command):
        config = BotConfig(failure_report_dir=tmp_path / "failures")
        router = Router.from_config(config)

        def explode(context):
            raise RuntimeError("boom")

        router.register_command("/greet", explode)
        envelope = make_command("/greet")
        router.route(envelope)

        reporter = LocalFileReporter(tmp_path / "failures")
        stored = reporter.stored(EventType.COMMAND)
        assert [f.envelope_id for f in stored] == [envelope.envelope_id]
        assert stored[0].acked_by == "router"

    def test_equals_mode_applied(self, make_message):
        router = Router.from_config(BotConfig(message_match_mode="equals"))
        router.register_message("hello", lambda ctx: None)
        assert router.route(make_message("hello there")).handler is None


class TestConfigureLogging:
    def test_installs_single_rich_handler(self):
        root = logging.getLogger()
        before = list(root.handlers)
        try:
            configure_logging("DEBUG")
            configure_logging("DEBUG")
            rich_handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
            assert len(rich_handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = before
            root.setLevel(logging.WARNING)

"""Bot configuration — env-driven via pydantic-settings.

Reads from a .env file and STARTERBOT_* environment variables.  The bot
token and signing secret are supplied externally at startup; the router
itself never reads them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


class ConfigError(RuntimeError):
    """Raised when the configuration cannot support a safe startup.

    The process should exit; this error must not be caught and ignored.
    """


class BotConfig(BaseSettings):
    """Runtime configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export STARTERBOT_BOT_TOKEN=xoxb-...
        export STARTERBOT_SIGNING_SECRET=...
        export STARTERBOT_LOG_LEVEL=DEBUG

    Or via .env file::

        STARTERBOT_ENVIRONMENT=production
        STARTERBOT_PORT=3000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STARTERBOT_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Platform credentials
    bot_token: str = ""
    signing_secret: str = ""

    # Listener
    host: str = "0.0.0.0"
    port: int = 3000

    # Routing
    ack_timeout_seconds: float = 3.0
    message_match_mode: Literal["contains", "equals"] = "contains"

    # Observability
    failure_report_dir: Path | None = None

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

    def validate_for_startup(self) -> None:
        """Fail hard if production constraints are violated.

        Raises
        ------
        ConfigError
            In production when debug is on or a credential is missing.
        """
        if not self.is_production:
            return
        problems: list[str] = []
        if self.debug:
            problems.append("debug must be disabled in production")
        if not self.bot_token:
            problems.append("STARTERBOT_BOT_TOKEN is not set")
        if not self.signing_secret:
            problems.append("STARTERBOT_SIGNING_SECRET is not set")
        if problems:
            raise ConfigError(
                "Production configuration invalid: " + "; ".join(problems)
            )


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger through rich.  Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(rich_tracebacks=True, show_path=False))


# Module-level singleton; import as `from starterbot.config import config`
config = BotConfig()

"""The demo bot — assembles a Router with the starter handler set.

There is no module-level app instance; callers build one explicitly and
hand it to whatever drives the transport loop.
"""

from __future__ import annotations

from starterbot.app.handlers import register_handlers
from starterbot.client import MessagingClient
from starterbot.config import BotConfig
from starterbot.core.acknowledgment import Acknowledger
from starterbot.core.router import Router


def build_router(
    client: MessagingClient | None = None,
    acknowledger: Acknowledger | None = None,
    config: BotConfig | None = None,
) -> Router:
    """Create a Router from *config* with every demo handler registered.

    Raises
    ------
    ConfigError
        If the configuration is not fit for startup.
    DuplicateRegistrationError
        If the handler set registers a key twice.
    """
    config = config or BotConfig()
    config.validate_for_startup()
    router = Router.from_config(config, client=client, acknowledger=acknowledger)
    register_handlers(router)
    router.freeze()
    return router


__all__ = ["build_router", "register_handlers"]

"""starterbot: a starter chat bot built on a reusable command & event router.

The router maps decoded inbound envelopes (slash commands, messages,
shortcuts, view submissions, actions, platform events) to registered
handlers and guarantees each envelope that needs it is acknowledged
exactly once.  ``starterbot.app`` wires up the demo handler set.
"""

__version__ = "0.1.0"

from starterbot.core.router import Router
from starterbot.app import build_router
from starterbot.cli.app import app as cli

__all__ = ["Router", "build_router", "cli", "__version__"]

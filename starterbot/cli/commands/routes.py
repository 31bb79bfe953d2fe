"""``starterbot routes`` — list the demo bot's registered handlers."""

from __future__ import annotations

from rich.console import Console

from starterbot.app import build_router
from starterbot.cli.renderer import DispatchRenderer

console = Console()


def routes_cmd() -> None:
    """Show every handler registration, in match order per category."""
    router = build_router()
    renderer = DispatchRenderer(console=console)
    console.print(renderer.render_routes(router.registry))
    console.print(f"[dim]{len(router.registry)} registrations[/dim]")

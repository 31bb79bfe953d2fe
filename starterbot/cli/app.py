"""Main Typer application — imports and registers all CLI commands.

Entry point: ``starterbot`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from starterbot.cli.commands.demo import demo_cmd
from starterbot.cli.commands.route_cmd import route_cmd
from starterbot.cli.commands.routes import routes_cmd
from starterbot.config import config, configure_logging

app = typer.Typer(
    name="starterbot",
    help="starterbot: a starter chat bot built on a command & event router.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Override STARTERBOT_LOG_LEVEL."
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    configure_logging(log_level or config.log_level)


# Register subcommands
app.command(name="routes", help="List the demo bot's registered handlers.")(routes_cmd)
app.command(name="route", help="Route one envelope from a JSON file.")(route_cmd)
app.command(name="demo", help="Route a scripted set of sample envelopes.")(demo_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

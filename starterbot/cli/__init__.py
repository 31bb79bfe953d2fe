"""starterbot CLI — Typer-based command-line interface.

Provides the ``starterbot`` command with subcommands for listing the demo
bot's routes, routing a single envelope from a file, and running the
scripted demo.

All output uses Rich for formatted terminal display.
"""

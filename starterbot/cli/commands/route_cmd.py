"""``starterbot route`` — route a single envelope read from a JSON file.

The file holds either an envelope in canonical form (with ``event_type``)
or, with ``--platform``, a raw platform payload as the transport would
receive it.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from starterbot.app import build_router
from starterbot.cli.renderer import DispatchRenderer
from starterbot.client import RecordingClient
from starterbot.core.acknowledgment import RecordingAcknowledger
from starterbot.core.codec import EnvelopeCodec, EnvelopeValidationError
from starterbot.inbound import decode_payload

console = Console()


def route_cmd(
    envelope_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file holding the envelope."
    ),
    platform: bool = typer.Option(
        False, "--platform", help="Treat the file as a raw platform payload."
    ),
) -> None:
    """Route one envelope through the demo bot and show what happened."""
    raw = envelope_file.read_text(encoding="utf-8")
    try:
        if platform:
            envelope = decode_payload(json.loads(raw))
        else:
            envelope = EnvelopeCodec.decode(raw)
    except (EnvelopeValidationError, json.JSONDecodeError) as exc:
        console.print(f"[bold red]Invalid envelope:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    client = RecordingClient()
    acknowledger = RecordingAcknowledger()
    router = build_router(client=client, acknowledger=acknowledger)

    result = router.route(envelope)
    DispatchRenderer(console=console).print_result(
        result, client.flush(), title=f"{envelope.event_type.value} {envelope.routing_key}"
    )
    if not result.ok:
        raise typer.Exit(code=1)

"""``starterbot demo`` — route a scripted set of envelopes through the bot.

Walks through every interaction style the demo handler set covers,
showing the dispatch result and the outbound calls after each envelope.
The modal scenario opens a view from a shortcut and then updates the same
view from a button click, correlating the two dispatches by view id.
"""

from __future__ import annotations

import time

import typer
from rich.console import Console
from rich.panel import Panel

from starterbot.app import build_router
from starterbot.app.views import CHANGE_MESSAGE_ACTION_ID, MODAL_CALLBACK_ID
from starterbot.cli.renderer import DispatchRenderer
from starterbot.client import OpenViewPayload, RecordingClient
from starterbot.core.acknowledgment import RecordingAcknowledger
from starterbot.models.dispatch import DispatchOutcome
from starterbot.models.envelopes import (
    ActionEnvelope,
    CommandEnvelope,
    EnvelopeBase,
    MessageEnvelope,
    PlatformEventEnvelope,
    ShortcutEnvelope,
    ViewSubmissionEnvelope,
)

console = Console()

DEMO_USER = "U0DEMO"
DEMO_CHANNEL = "C0DEMO"


def demo_cmd(
    delay: float = typer.Option(
        0.0,
        "--delay",
        "-d",
        help="Delay in seconds between envelopes for visual effect.",
    ),
) -> None:
    """Route sample envelopes through the demo bot."""
    client = RecordingClient()
    acknowledger = RecordingAcknowledger()
    router = build_router(client=client, acknowledger=acknowledger)
    renderer = DispatchRenderer(console=console)

    console.print()
    console.print(
        Panel(
            "[bold]starterbot demo[/bold]\n\n"
            "Routing one envelope per interaction style.\n"
            "Each panel shows the dispatch result and outbound calls.",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    outcomes: list[DispatchOutcome] = []

    def run(title: str, envelope: EnvelopeBase) -> list:
        console.print(f"\n[cyan]>>> {title}[/cyan]")
        result = router.route(envelope)
        payloads = client.flush()
        renderer.print_result(result, payloads)
        outcomes.append(result.outcome)
        time.sleep(delay)
        return payloads

    run("Slash command /greet", CommandEnvelope(
        name="/greet", user_id=DEMO_USER, channel_id=DEMO_CHANNEL,
    ))
    run("Message 'hello everyone'", MessageEnvelope(
        text="hello everyone", author_id=DEMO_USER, channel_id=DEMO_CHANNEL,
    ))
    run("Message 'bye everyone'", MessageEnvelope(
        text="bye everyone", author_id=DEMO_USER, channel_id=DEMO_CHANNEL,
    ))
    run("Message nobody listens for", MessageEnvelope(
        text="what's for lunch?", author_id=DEMO_USER, channel_id=DEMO_CHANNEL,
    ))

    opened = run("Global shortcut modal_shortcut", ShortcutEnvelope(
        callback_id="modal_shortcut", trigger_id="T0DEMO.1", invoker_id=DEMO_USER,
    ))
    view_id = next(
        (p.view_id for p in opened if isinstance(p, OpenViewPayload)), None
    )
    run(f"Button click inside view {view_id}", ActionEnvelope(
        action_id=CHANGE_MESSAGE_ACTION_ID, view_id=view_id, user_id=DEMO_USER,
    ))
    run("Modal submitted", ViewSubmissionEnvelope(
        callback_id=MODAL_CALLBACK_ID, view_id=view_id or "V0000", submitter_id=DEMO_USER,
    ))
    run("Message shortcut message_shortcut", ShortcutEnvelope(
        callback_id="message_shortcut",
        trigger_id="T0DEMO.2",
        invoker_id=DEMO_USER,
        shortcut_kind="message",
        channel_id=DEMO_CHANNEL,
        channel_name="general",
        message_ts="1700000001.000100",
    ))
    run("Platform event app_home_opened", PlatformEventEnvelope(
        name="app_home_opened", user_id=DEMO_USER,
    ))

    handled = outcomes.count(DispatchOutcome.HANDLED)
    unmatched = outcomes.count(DispatchOutcome.NO_MATCH)
    failed = len(outcomes) - handled - unmatched
    console.print()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Demo Complete![/bold green]",
                "",
                f"[bold]Envelopes:[/bold]  {len(outcomes)}",
                f"[bold]Handled:[/bold]    {handled}",
                f"[bold]No match:[/bold]   {unmatched}",
                f"[bold]Failed:[/bold]     {failed}",
                f"[bold]Acks sent:[/bold]  {len(acknowledger.acked)}",
            ]),
            title="[bold]Demo Summary[/bold]",
            border_style="green" if not failed else "red",
            padding=(1, 2),
        )
    )
    if failed:
        raise typer.Exit(code=1)

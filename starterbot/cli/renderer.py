"""Rich terminal rendering for dispatch results and outbound calls.

Color scheme
------------
- green     : HANDLED
- dim       : NO_MATCH
- bold red  : HANDLER_FAILED
- yellow    : ACK_FAILED
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from starterbot.client.recording import (
    OpenViewPayload,
    OutboundPayload,
    PostMessagePayload,
    UpdateViewPayload,
)
from starterbot.models.dispatch import DispatchOutcome, DispatchResult

if TYPE_CHECKING:
    from starterbot.core.registry import RegistryTable


_OUTCOME_LABELS: dict[DispatchOutcome, str] = {
    DispatchOutcome.HANDLED: "[green]HANDLED[/green]",
    DispatchOutcome.NO_MATCH: "[dim]NO MATCH[/dim]",
    DispatchOutcome.HANDLER_FAILED: "[bold red]HANDLER FAILED[/bold red]",
    DispatchOutcome.ACK_FAILED: "[yellow]ACK FAILED[/yellow]",
}

_BORDER_STYLES: dict[DispatchOutcome, str] = {
    DispatchOutcome.HANDLED: "green",
    DispatchOutcome.NO_MATCH: "dim",
    DispatchOutcome.HANDLER_FAILED: "red",
    DispatchOutcome.ACK_FAILED: "yellow",
}


class DispatchRenderer:
    """Renders routing output as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_result(self, result: DispatchResult, title: str | None = None) -> Panel:
        lines = [
            f"[bold]Outcome:[/bold]   {_OUTCOME_LABELS[result.outcome]}",
            f"[bold]Event:[/bold]     {result.event_type.value}",
            f"[bold]Envelope:[/bold]  {result.envelope_id}",
            f"[bold]Handler:[/bold]   {result.handler or '-'}",
            f"[bold]Ack:[/bold]       {result.ack_state.value}"
            + (f" (by {result.acked_by})" if result.acked_by else ""),
            f"[bold]Duration:[/bold]  {result.duration_ms}ms",
        ]
        if result.error:
            lines.append(f"[bold red]Error:[/bold red]     {escape(result.error)}")
        return Panel(
            "\n".join(lines),
            title=f"[bold]{escape(title)}[/bold]" if title else None,
            border_style=_BORDER_STYLES[result.outcome],
            padding=(0, 2),
        )

    def render_outbound(self, payloads: list[OutboundPayload]) -> Table:
        table = Table(title="Outbound calls", show_lines=False)
        table.add_column("Call", style="cyan")
        table.add_column("Target")
        table.add_column("Content")
        for payload in payloads:
            if isinstance(payload, PostMessagePayload):
                table.add_row("post_message", payload.channel, escape(payload.text))
            elif isinstance(payload, OpenViewPayload):
                table.add_row("open_view", payload.view_id, _view_title(payload.view))
            elif isinstance(payload, UpdateViewPayload):
                table.add_row("update_view", payload.view_id, _view_title(payload.view))
        return table

    def render_routes(self, registry: RegistryTable) -> Table:
        table = Table(title="Registered handlers")
        table.add_column("Event", style="cyan")
        table.add_column("Match")
        table.add_column("Handler", style="green")
        for registration in registry.registrations():
            table.add_row(
                registration.event_type.value,
                escape(registration.description),
                registration.name,
            )
        return table

    def print_result(
        self,
        result: DispatchResult,
        payloads: list[OutboundPayload] | None = None,
        title: str | None = None,
    ) -> None:
        self.console.print(self.render_result(result, title=title))
        if payloads:
            self.console.print(self.render_outbound(payloads))


def _view_title(view: dict) -> str:
    return (view.get("title") or {}).get("text") or view.get("callback_id") or ""

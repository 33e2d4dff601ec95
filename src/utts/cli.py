# src/utts/cli.py
"""
utts notifications Command Line Interface (CLI).

This module is the terminal counterpart of the notification dashboard. It is
pure presentation over :class:`utts.notifications.Notifications`; all state
lives in the JSONL log under the config directory.

Usage
-----
    # Record a notification (optionally with a banner and a click action)
    $ utts-notifications log "build finished" --caller "ci: deploy" --url https://ci/run/42

    # Show active notifications, most recent first
    $ utts-notifications list --limit 10

    # Say it again / act on it / clear it
    $ utts-notifications replay 3f9a1c0e
    $ utts-notifications activate 3f9a1c0e
    $ utts-notifications dismiss 3f9a1c0e
    $ utts-notifications dismiss-all
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from utts.core.settings import get_logger, load_settings
from utts.notifications import Notification, Notifications
from utts.notifications.record import parse_timestamp
from utts.notifier import TerminalNotifier

load_dotenv()

app = typer.Typer(
    help="utts: review, replay and dismiss spoken notifications.",
    rich_markup_mode="markdown",
)
console = Console()

_SINCE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%SZ"]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _service() -> Notifications:
    """Build the façade from current settings (env is re-read per call)."""
    get_logger("utts")
    return Notifications.from_settings(load_settings())


def _caller_display(caller: str | None) -> str:
    """Render the ``"project: intent"`` caller convention."""
    if not caller:
        return ""
    project, _, intent = caller.partition(":")
    if intent.strip():
        return f"[bold]{escape(project.strip())}[/bold] {escape(intent.strip())}"
    return f"[bold]{escape(project.strip())}[/bold]"


def _format_time(timestamp: str) -> str:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return timestamp
    return parsed.astimezone().strftime("%b %d %H:%M")


def _render_table(rows: list[Notification], service: Notifications) -> None:
    table = Table(show_lines=False)
    table.add_column("ID", style="dim")
    table.add_column("Time")
    table.add_column("Caller")
    table.add_column("Message")
    table.add_column("", justify="right")

    for n in rows:
        flags = []
        if n.dismissed:
            flags.append("✓")
        if service.has_action(n):
            flags.append("→")
        table.add_row(
            n.id,
            _format_time(n.timestamp),
            _caller_display(n.caller),
            escape(n.text),
            " ".join(flags),
        )
    console.print(table)


def _not_found(notification_id: str) -> typer.Exit:
    console.print(f"[bold red]❌ No notification with id {escape(notification_id)}[/bold red]")
    return typer.Exit(code=1)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def log(
    text: Annotated[str, typer.Argument(help="Message that was spoken.")],
    caller: Annotated[
        str | None, typer.Option("--caller", "-c", help="Invoking context, 'project: intent'.")
    ] = None,
    agent: Annotated[str | None, typer.Option("--agent", "-a", help="Agent persona.")] = None,
    voice: Annotated[str | None, typer.Option("--voice", help="Synthesis voice id.")] = None,
    shell: Annotated[
        str | None, typer.Option("--shell", help="Shell command to run on activation.")
    ] = None,
    url: Annotated[str | None, typer.Option("--url", help="URL to open on activation.")] = None,
    banner: Annotated[
        bool, typer.Option("--banner/--no-banner", help="Also show a desktop banner.")
    ] = False,
) -> None:
    """Record a notification in the history."""
    if shell and url:
        console.print("[bold red]❌ Use either --shell or --url, not both.[/bold red]")
        raise typer.Exit(code=2)

    metadata: dict[str, Any] = {}
    if shell:
        metadata["action"] = {"type": "shell", "command": shell}
    elif url:
        metadata["action"] = {"type": "url", "url": url}

    try:
        n = _service().log(text, caller=caller, agent=agent, voice=voice, metadata=metadata)
    except OSError as e:
        console.print(f"[bold red]❌ Could not write notification log:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    if banner:
        TerminalNotifier().send_notification(
            notification_text=text, caller_name=caller
        )
    console.print(f"[green]Logged[/green] {n.id}")


@app.command("list")  # type: ignore[misc]
def list_notifications(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum rows.")] = 50,
    include_dismissed: Annotated[
        bool, typer.Option("--all", "-A", help="Include dismissed notifications.")
    ] = False,
    since: Annotated[
        datetime | None,
        typer.Option("--since", formats=_SINCE_FORMATS, help="Only entries at/after (UTC)."),
    ] = None,
) -> None:
    """Show notifications, most recent first."""
    service = _service()
    rows = service.list(limit=limit, since=since, include_dismissed=include_dismissed)
    if not rows:
        console.print("[dim]No active notifications. You're all caught up![/dim]")
        return
    _render_table(rows, service)


@app.command()  # type: ignore[misc]
def show(notification_id: Annotated[str, typer.Argument(help="Notification id.")]) -> None:
    """Print one notification in full."""
    n = _service().find(notification_id)
    if n is None:
        raise _not_found(notification_id)
    status = f"dismissed {n.dismissed_at}" if n.dismissed else "active"
    body = "\n".join(
        [
            escape(n.text),
            "",
            f"[dim]caller:[/dim] {escape(n.caller or '-')}",
            f"[dim]agent/voice:[/dim] {escape(n.agent or '-')} / {escape(n.voice or '-')}",
            f"[dim]time:[/dim] {n.timestamp} ({status})",
        ]
    )
    console.print(Panel(body, title=n.id, border_style="cyan"))


@app.command()  # type: ignore[misc]
def dismiss(notification_id: Annotated[str, typer.Argument(help="Notification id.")]) -> None:
    """Mark one notification as dismissed."""
    n = _service().dismiss(notification_id)
    if n is None:
        raise _not_found(notification_id)
    console.print(f"[green]Dismissed[/green] {n.id}")


@app.command("dismiss-all")  # type: ignore[misc]
def dismiss_all() -> None:
    """Dismiss every active notification."""
    _service().dismiss_all()
    console.print("[green]All dismissed[/green]")


@app.command()  # type: ignore[misc]
def replay(notification_id: Annotated[str, typer.Argument(help="Notification id.")]) -> None:
    """Speak a notification again."""
    n = _service().replay(notification_id)
    if n is None:
        raise _not_found(notification_id)
    console.print(f"[cyan]Replaying…[/cyan] {escape(n.text)}")


@app.command()  # type: ignore[misc]
def activate(notification_id: Annotated[str, typer.Argument(help="Notification id.")]) -> None:
    """Run the notification's click action."""
    service = _service()
    n = service.activate(notification_id)
    if n is None:
        raise _not_found(notification_id)
    if not service.has_action(n):
        console.print(f"[dim]{n.id} has no action.[/dim]")
        return
    console.print(f"[green]Activated[/green] {n.id}")


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
) -> None:
    """Run the dashboard HTTP API."""
    from utts.api.server import run

    run(host=host, port=port)


if __name__ == "__main__":
    app()

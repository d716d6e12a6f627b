"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, List, Optional

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..adapters.calendar_store import InMemoryCalendarStore
from ..api.app import build_scheduler, create_app, parse_timestamp
from ..config import AppConfig
from ..domain.exceptions import ConfigError, InvalidRequestError, NoAvailableSlotError
from ..domain.models import SearchWindow
from ..logging_config import configure_logging
from ..services.meeting_scheduler import DEFAULT_MEETING_TITLE

app = typer.Typer(
    name="slotbooker",
    help="Find and book meeting slots that work for every participant",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ConfigError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    configure_logging(config.log_level)
    return config


@app.command()
def serve(
    config_file: ConfigOption = None,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port")] = None,
):
    """
    Run the HTTP API.
    """
    config = _load_config(config_file)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(f"[bold cyan]slotbooker[/bold cyan] listening on http://{bind_host}:{bind_port}")
    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_config=None,
    )


@app.command()
def schedule(
    participants: Annotated[List[str], typer.Argument(help="Participant ids (e.g. 'u1 u2')")],
    start: Annotated[str, typer.Option("--start", help="Window start (RFC 3339)")],
    end: Annotated[str, typer.Option("--end", help="Window end (RFC 3339)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Meeting duration in minutes")] = None,
    title: Annotated[str, typer.Option("--title", "-t", help="Meeting title")] = DEFAULT_MEETING_TITLE,
    config_file: ConfigOption = None,
):
    """
    Find the best slot against the configured calendar and book it.

    Examples:

        slotbooker schedule u1 u2 --start 2025-08-02T09:00:00Z --end 2025-08-02T17:00:00Z

        slotbooker schedule u1 --start 2025-08-04T08:00:00Z --end 2025-08-04T18:00:00Z -d 60
    """
    config = _load_config(config_file)
    duration_minutes = duration if duration is not None else config.scheduling.default_duration_minutes
    scheduler = build_scheduler(config, InMemoryCalendarStore(config.build_seed_events()))

    try:
        window = SearchWindow(start=parse_timestamp(start, "start"), end=parse_timestamp(end, "end"))
        booking = scheduler.schedule(
            participants=participants,
            window=window,
            duration_minutes=duration_minutes,
            title=title,
        )
    except InvalidRequestError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    except NoAvailableSlotError as e:
        console.print(f"[yellow]⚠ {e}[/yellow]")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ {booking.title}[/bold green]\n\n"
        f"[bold]When:[/bold] {booking.format_display(config.display_timezone)}\n"
        f"[bold]Participants:[/bold] {', '.join(booking.participants)}\n"
        f"[bold]Meeting id:[/bold] {booking.meeting_id}",
        title="Booked"
    ))


@app.command()
def calendar(
    participant: Annotated[str, typer.Argument(help="Participant id")],
    start: Annotated[str, typer.Option("--start", help="Range start (RFC 3339)")],
    end: Annotated[str, typer.Option("--end", help="Range end (RFC 3339)")],
    config_file: ConfigOption = None,
):
    """
    Show a participant's events in a time range.
    """
    config = _load_config(config_file)
    scheduler = build_scheduler(config, InMemoryCalendarStore(config.build_seed_events()))
    tz = config.display_timezone

    try:
        events = scheduler.calendar(
            participant,
            parse_timestamp(start, "start"),
            parse_timestamp(end, "end"),
        )
    except InvalidRequestError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not events:
        console.print(f"[yellow]No events for {participant} in this range.[/yellow]")
        return

    table = Table(title=f"Calendar of {participant}", show_header=True, header_style="bold cyan")
    table.add_column("Title", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Id", style="dim")

    for event in events:
        table.add_row(
            event.title,
            event.start.in_timezone(tz).format("YYYY-MM-DD HH:mm"),
            event.end.in_timezone(tz).format("YYYY-MM-DD HH:mm"),
            event.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def list_participants(config_file: ConfigOption = None):
    """
    List all configured participants.
    """
    config = _load_config(config_file)

    if not config.participants:
        console.print("[yellow]No participants defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured participants",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name", style="dim")

    for participant in config.participants:
        table.add_row(participant.id, participant.display_name())

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    console.print(f"\n[bold cyan]slotbooker[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_booking_source import JsonBookingSource
from ..adapters.rest_booking_source import RestBookingSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotFinderError
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="barberslots",
    help="Find bookable appointment slots for a barber",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def build_source(config: AppConfig):
    """Create the booking source selected in the configuration."""
    if config.source.kind == "rest":
        return RestBookingSource(
            base_url=config.source.base_url,
            api_key=config.source.api_key,
            timeout=config.source.timeout_seconds,
            timezone=config.timezone,
        )
    return JsonBookingSource(config.source.data_file, timezone=config.timezone)


def _parse_day(value: Optional[str], tz: str):
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Error parsing date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_now(value: Optional[str], tz: str):
    if not value:
        return None
    try:
        return pendulum.parse(value, tz=tz)
    except ValueError as e:
        console.print(f"[red]Error parsing --now '{value}': {e}[/red]")
        raise typer.Exit(1)


@app.command()
def slots(
    barber: Annotated[str, typer.Argument(help="Barber id or name")],
    day: Annotated[Optional[str], typer.Option("--date", help="Day to search (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Slot granularity in minutes")] = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Pretend the current time is this ISO timestamp.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    List the start times at which a service can be booked.

    Examples:

        barberslots slots joao --date 2026-10-20

        barberslots slots b1 --duration 60 --interval 15
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone

        barber_id = config.resolve_barber(barber) if config.barbers else barber
        search_day = _parse_day(day, tz)
        current_time = _parse_now(now, tz)
        service_duration = duration if duration is not None else config.defaults.service_duration_minutes
        slot_interval = interval if interval is not None else config.defaults.slot_interval_minutes

        service = AvailabilityService(
            source=build_source(config),
            timezone=tz,
            slot_interval_minutes=slot_interval,
        )
        available = service.available_slots(
            barber_id,
            search_day,
            service_duration,
            now=current_time,
        )

        console.print(
            f"\n[bold cyan]{barber}[/bold cyan] on {search_day.format('DD/MM/YYYY')} "
            f"({service_duration} min service, {slot_interval} min interval)\n"
        )

        if not available:
            console.print("[yellow]⚠ No available slots for this day.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(available)} available slot(s):[/bold green]")
        console.print("  " + "  ".join(available))
        console.print()

    except (SlotFinderError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_barbers(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured barbers.
    """
    try:
        config = _load_config(config_file)

        if not config.barbers:
            console.print("[yellow]No barbers defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured barbers",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="dim")
        table.add_column("Name (Alias)", style="bold yellow")

        for barber in config.barbers:
            table.add_row(barber.id, barber.name)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

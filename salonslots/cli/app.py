"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from pendulum import Date
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.snapshot_file import SnapshotFile
from ..adapters.supabase_client import SupabaseClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SalonSlotsError
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="salonslots",
    help="Check salon working days and free appointment slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", "-f", help="Snapshot file (JSON/YAML) to use instead of the data store")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show warnings and debug logging")] = False,
):
    """
    Availability queries for the salon booking calendar.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)]
    )


def _parse_date(value: str, label: str) -> Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Could not parse {label} '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_service(config_file: Optional[Path], data_file: Optional[Path]) -> tuple[AppConfig, AvailabilityService]:
    """
    Load configuration and pick the snapshot source.

    A snapshot file (``--data`` or ``data_file`` in the config) wins over the
    data store connection.
    """
    try:
        config = AppConfig.load_or_default(config_file or get_default_config_path())
    except ValueError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {e}")
        raise typer.Exit(1)

    snapshot_path = data_file or config.data_file

    if snapshot_path is not None:
        source = SnapshotFile(snapshot_path)
    elif config.supabase is not None:
        source = SupabaseClient(
            url=config.supabase.url,
            api_key=config.supabase.api_key,
            timeout_seconds=config.supabase.timeout_seconds
        )
    else:
        console.print(
            "[red]No data source configured.[/red] "
            "Pass --data or set 'data_file' or 'supabase' in config.yaml."
        )
        raise typer.Exit(1)

    return config, AvailabilityService.from_config(config, source)


def _print_warnings(warnings: List[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")


@app.command()
def check(
    day: Annotated[str, typer.Argument(help="Date to check (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Check whether the salon is open on a date.
    """
    target = _parse_date(day, "date")

    try:
        _, service = _build_service(config_file, data_file)
        status = service.day_status(target)
        override = status.override

        _print_warnings(status.warnings)

        label = "[bold green]open[/bold green]" if status.is_working_day else "[bold red]closed[/bold red]"
        console.print(f"{target.format('DD.MM.YYYY')} ({target.format('dddd')}): {label}")

        if status.is_working_day and not status.is_bookable:
            console.print("  [dim]Outside the online booking window[/dim]")

        if override is not None:
            detail = override.reason or "no reason given"
            if override.has_time_window:
                detail = f"{override.blocked_window} blocked: {detail}"
            console.print(f"  Override: {detail}")

    except SalonSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def days(
    start: Annotated[Optional[str], typer.Option("--start", help="First date (YYYY-MM-DD), default today")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Last date (YYYY-MM-DD), default end of booking horizon")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the open days in a date range.
    """
    try:
        config, service = _build_service(config_file, data_file)

        first = _parse_date(start, "start date") if start else pendulum.today().date()
        last = _parse_date(end, "end date") if end else first.add(days=config.booking_horizon_days)

        if last < first:
            console.print("[red]The end date must not be before the start date.[/red]")
            raise typer.Exit(1)

        result = service.working_days(first, last)
        open_days = result.days

        _print_warnings(result.warnings)

        if not open_days:
            console.print("[yellow]No open days in this range.[/yellow]")
            return

        console.print(f"[bold green]✓ {len(open_days)} open day(s):[/bold green]\n")
        for open_day in open_days:
            console.print(f"  {open_day.format('ddd, DD.MM.YYYY')}")

    except SalonSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def slots(
    day: Annotated[str, typer.Argument(help="Date to book (YYYY-MM-DD)")],
    service_ids: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service id, repeat for several services")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List free start times for the selected services on a date.

    Examples:

        salonslots slots 2025-11-10 -s manicure

        salonslots slots 2025-11-10 -s manicure -s pedicure --data snapshot.yaml
    """
    target = _parse_date(day, "date")

    try:
        _, service = _build_service(config_file, data_file)
        result = service.find_slots(target, service_ids or [])

        _print_warnings(result.warnings)

        if not result.is_working_day:
            console.print(f"[yellow]The salon is closed on {target.format('DD.MM.YYYY')}.[/yellow]")
            return

        if not result.slots:
            console.print("[yellow]⚠ No free times left on this day.[/yellow]")
            return

        console.print(f"[bold green]✓ {len(result.slots)} free time(s) on {target.format('DD.MM.YYYY')}:[/bold green]\n")
        console.print("  " + "  ".join(result.slots))

    except SalonSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command(name="services")
def list_services(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the service catalog.
    """
    try:
        _, service = _build_service(config_file, data_file)
        catalog = service.list_services()

        if not catalog:
            console.print("[yellow]No services defined.[/yellow]")
            return

        table = Table(title="Services", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="bold yellow")
        table.add_column("Name")
        table.add_column("Category", style="dim")
        table.add_column("Duration", justify="right")
        table.add_column("Price", justify="right")

        for item in catalog.values():
            table.add_row(item.id, item.name, item.category, f"{item.duration_minutes} min", str(item.price))

        console.print()
        console.print(table)
        console.print()

    except SalonSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def overrides(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List schedule overrides in evaluation order, blackout dates first.
    """
    try:
        _, service = _build_service(config_file, data_file)
        snapshot = service.load_day_snapshot()
        ordered = service.engine.override_resolver.ordered(snapshot.overrides)

        _print_warnings(snapshot.warnings)

        table = Table(title="Schedule overrides", show_header=True, header_style="bold cyan")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Effect", style="bold")
        table.add_column("Reason", style="dim")

        for override in ordered:
            if override.has_time_window:
                effect = f"blocked {override.blocked_window}"
            elif override.is_working:
                effect = "open"
            else:
                effect = "closed (permanent)" if override.permanent else "closed"

            table.add_row(
                override.date_from.format("DD.MM.YYYY"),
                override.date_to.format("DD.MM.YYYY"),
                effect,
                override.reason or ""
            )

        console.print()
        console.print(table)
        console.print()

    except SalonSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

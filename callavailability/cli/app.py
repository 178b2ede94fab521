"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Callable, Optional, Tuple

import typer
from pendulum import DateTime, Timezone
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_repository import JsonCallRepository, parse_timestamp
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import CallAvailabilityError, SelectedTimeUnavailableError
from ..domain.models import TimeRange, truncate_to_minute
from ..services.call_availability import CallAvailabilityService

app = typer.Typer(
    name="callavailability",
    help="Compute the remaining bookable windows of a call offering",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", "-d", help="Path to the call data JSON file. Overrides the config."),
]
NowOption = Annotated[
    Optional[str],
    typer.Option("--now", help="Evaluate as of this time (ISO-8601) instead of the current time."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging."),
]


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load_config(config_file: Optional[Path]) -> Tuple[AppConfig, Path]:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path), config_path


def _parse_time(value: str, zone: Timezone, label: str) -> DateTime:
    """Parse an ISO-8601 timestamp into the configured timezone."""
    try:
        return parse_timestamp(value, zone)
    except ValueError as e:
        console.print(f"[red]Error parsing {label}: {e}[/red]")
        raise typer.Exit(1)


def _build_service(
    config: AppConfig,
    config_path: Path,
    data_file: Optional[Path],
    now: Optional[str],
) -> CallAvailabilityService:
    repository = JsonCallRepository(
        data_file=data_file or config.resolve_data_file(config_path),
        timezone=config.timezone,
    )

    clock: Optional[Callable[[], DateTime]] = None
    if now:
        fixed_now = _parse_time(now, config.get_zone(), "--now")
        clock = lambda: fixed_now  # noqa: E731

    return CallAvailabilityService(
        repository=repository,
        limitations=config.limitations.to_limitations(),
        timezone=config.timezone,
        clock=clock,
    )


@app.command()
def find(
    call_id: Annotated[str, typer.Argument(help="Identifier of the call offering")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    now: NowOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the windows as JSON.")] = False,
    verbose: VerboseOption = False,
):
    """
    List the windows a new call can still be booked into.

    Examples:

        callavailability find portfolio-review

        callavailability find portfolio-review --now 2024-11-25T08:00 --json
    """
    _configure_logging(verbose)

    try:
        config, config_path = _load_config(config_file)
        service = _build_service(config, config_path, data_file, now)

        windows = asyncio.run(service.remaining_availabilities(call_id))

    except (CallAvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([window.to_dict() for window in windows], indent=2))
        return

    if not windows:
        console.print("[yellow]⚠ No bookable time left for this call.[/yellow]")
        return

    table = Table(
        title=f"Bookable windows for {call_id}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Window", style="bold")
    table.add_column("Minutes", justify="right", style="dim")

    for window in windows:
        table.add_row(window.format_display(), str(window.duration_minutes()))

    console.print()
    console.print(table)
    console.print()


@app.command()
def check(
    call_id: Annotated[str, typer.Argument(help="Identifier of the call offering")],
    start: Annotated[str, typer.Argument(help="Requested start time (ISO-8601)")],
    end: Annotated[str, typer.Argument(help="Requested end time (ISO-8601)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    now: NowOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a call can be booked for the given time.
    """
    _configure_logging(verbose)

    try:
        config, config_path = _load_config(config_file)
        service = _build_service(config, config_path, data_file, now)

        selected = TimeRange(
            start=truncate_to_minute(_parse_time(start, config.get_zone(), "start time")),
            end=truncate_to_minute(_parse_time(end, config.get_zone(), "end time")),
        )
        asyncio.run(service.validate_selected_time(call_id, selected))

    except SelectedTimeUnavailableError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        raise typer.Exit(1)

    except (CallAvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓ {selected} is available[/green]")


@app.command()
def limits(config_file: ConfigOption = None):
    """
    Show the configured booking limits.
    """
    try:
        config, _ = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    notice = config.limitations.minimum_notice_in_minutes
    per_day = config.limitations.maximum_calls_per_day

    table = Table(title="Call limitations", show_header=True, header_style="bold cyan")
    table.add_column("Limit", style="bold yellow")
    table.add_column("Value")
    table.add_row("Minimum notice", f"{notice} minutes" if notice is not None else "none")
    table.add_row("Maximum calls per day", str(per_day) if per_day is not None else "unlimited")
    table.add_row("Timezone", config.timezone)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]callavailability[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

"""Command-line entry point for the device command simulator."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

from cmdsim import __version__
from cmdsim.core.config import LoggingConfig, Settings
from cmdsim.models.command import CommandStatus, CommandType
from cmdsim.models.view import CommandsView, LoadState, StatusFilter
from cmdsim.services.mock_api import MockApi
from cmdsim.services.polling import CommandPoller, DeviceListLoader
from cmdsim.services.scheduler import CommandScheduler
from cmdsim.shared.filters import visible_commands
from cmdsim.shared.params import InvalidParamsError, parse_params_text

app = typer.Typer(
    name="cmdsim",
    help="Device command simulator - watch commands move through their lifecycle",
)
console = Console()
logger = structlog.get_logger()

STATUS_STYLES = {
    CommandStatus.PENDING: "yellow",
    CommandStatus.LEASED: "cyan",
    CommandStatus.SUCCEEDED: "green",
    CommandStatus.FAILED: "red",
}


def configure_logging(config: LoggingConfig) -> None:
    """Filter structlog output below the configured level."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def load_settings(config_path: Optional[Path]) -> Settings:
    """Load settings from file or defaults."""
    if config_path and config_path.exists():
        logger.info("loading_config", path=str(config_path))
        return Settings.from_yaml(config_path)

    default_paths = [
        Path("config/cmdsim.yaml"),
        Path("cmdsim.yaml"),
        Path.home() / ".cmdsim" / "config.yaml",
    ]

    for path in default_paths:
        if path.exists():
            logger.info("loading_config", path=str(path))
            return Settings.from_yaml(path)

    logger.info("using_default_config")
    return Settings()


def _format_time(value) -> str:
    return value.strftime("%H:%M:%S") if value else "-"


def build_commands_table(view: CommandsView, status_filter: StatusFilter) -> Table:
    """Render a command view as a table."""
    title = f"{view.device_id} - {view.state.value}"
    if view.last_updated_at:
        title += f" (updated {_format_time(view.last_updated_at)})"

    table = Table(title=title, caption=view.error)
    table.add_column("Command")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Created")
    table.add_column("Lease expires")
    table.add_column("Completed")
    table.add_column("Params")

    for command in visible_commands(view.commands, status_filter):
        style = STATUS_STYLES.get(command.status, "")
        table.add_row(
            command.command_id,
            command.type.value,
            f"[{style}]{command.status.value}[/{style}]",
            _format_time(command.created_at),
            _format_time(command.lease_expires_at),
            _format_time(command.completed_at),
            json.dumps(command.params),
        )

    return table


async def run_watch(
    settings: Settings,
    device_id: str,
    duration: float,
    status_filter: StatusFilter,
    schedule: Optional[CommandType] = None,
    params: str = "",
) -> None:
    """Poll a device's commands and print every settled update."""
    api = MockApi.from_settings(settings)

    def render(view: CommandsView) -> None:
        if view.refreshing or view.state in (LoadState.IDLE, LoadState.LOADING):
            return
        if view.state == LoadState.ERROR:
            console.print(f"[red]Error:[/red] {view.error}")
            return
        console.print(build_commands_table(view, status_filter))

    async with CommandPoller(
        api,
        interval=settings.polling.interval_seconds,
        on_change=render,
    ) as poller:
        if schedule is not None:
            scheduler = CommandScheduler(api, on_scheduled=lambda _command: poller.refresh())
            command = await scheduler.submit(device_id, schedule, params)
            if command is None:
                console.print(f"[red]Could not schedule command:[/red] {scheduler.error}")
            else:
                console.print(f"Scheduled {command.command_id} ({command.type.value})")

        poller.select_device(device_id)

        if duration > 0:
            await asyncio.sleep(duration)
        else:
            await asyncio.Event().wait()

    stats = api.store.get_stats()
    console.print(
        f"{stats['total_commands']} commands: "
        f"{stats['pending']} pending, {stats['leased']} leased, "
        f"{stats['succeeded']} succeeded, {stats['failed']} failed"
    )


def _apply_overrides(
    settings: Settings,
    latency: Optional[int],
    force_error: bool,
    interval: Optional[float] = None,
) -> Settings:
    if latency is not None:
        settings.network.latency_ms = latency
    if force_error:
        settings.network.force_error = True
    if interval is not None:
        settings.polling.interval_seconds = interval
    return settings


@app.command()
def watch(
    device_id: str = typer.Argument(..., help="Device to watch"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    duration: float = typer.Option(15.0, "--duration", "-d", help="Seconds to watch (0 = until interrupted)"),
    status: StatusFilter = typer.Option(StatusFilter.ALL, "--status", help="Only show these commands"),
    schedule: Optional[CommandType] = typer.Option(None, "--schedule", help="Schedule a command first"),
    params: str = typer.Option("", "--params", help="JSON params for --schedule"),
    latency: Optional[int] = typer.Option(None, "--latency", help="Simulated latency in ms"),
    interval: Optional[float] = typer.Option(None, "--interval", help="Polling interval in seconds"),
    force_error: bool = typer.Option(False, "--force-error", help="Make every API call fail"),
) -> None:
    """Watch a device's commands move through their lifecycle."""
    if schedule is not None:
        try:
            parse_params_text(params)
        except InvalidParamsError as e:
            console.print(f"[red]Invalid --params:[/red] {e}")
            raise typer.Exit(code=1)

    settings = _apply_overrides(load_settings(config), latency, force_error, interval)
    configure_logging(settings.logging)

    try:
        asyncio.run(run_watch(settings, device_id, duration, status, schedule, params))
    except KeyboardInterrupt:
        pass


@app.command()
def devices(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    latency: Optional[int] = typer.Option(None, "--latency", help="Simulated latency in ms"),
    force_error: bool = typer.Option(False, "--force-error", help="Make every API call fail"),
) -> None:
    """List the simulated devices."""
    settings = _apply_overrides(load_settings(config), latency, force_error)
    configure_logging(settings.logging)

    loader = DeviceListLoader(MockApi.from_settings(settings))
    asyncio.run(loader.load())

    if loader.state == LoadState.ERROR:
        console.print(f"[red]Error:[/red] {loader.error}")
        raise typer.Exit(code=1)

    for device in loader.devices:
        console.print(device.device_id)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"cmdsim v{__version__}")


if __name__ == "__main__":
    app()

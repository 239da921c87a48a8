"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from keyring.errors import KeyringError
from rich.console import Console
from rich.table import Table

from ..adapters.console_reporter import ConsoleReporter
from ..adapters.mock_respa_client import MockRespaClient
from ..adapters.push_notifier import PushNotifier
from ..adapters.respa_client import RespaClient
from ..adapters.snapshot_store import JsonSnapshotStore
from ..adapters.token_store import PushTokenStore
from ..config import AppConfig
from ..domain.exceptions import FreeSlotError
from ..logging_config import setup_logging
from ..services.watcher import FreeSlotWatcher, ReporterProtocol

app = typer.Typer(
    name="freeslotwatch",
    help="Watch a Respa resource for newly freed reservation slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock calendar data instead of the Respa API.")]
DaysOption = Annotated[Optional[int], typer.Option("--days", "-d", min=1, help="Number of days to look ahead")]
SnapshotOption = Annotated[Optional[Path], typer.Option("--snapshot", help="Snapshot file, overrides the config")]
NoPushOption = Annotated[bool, typer.Option("--no-push", help="Do not send push notifications.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _fail(message: object) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(1)


def _load_config(config_file: Optional[Path]) -> AppConfig:
    try:
        return AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        raise _fail(e)


def _build_reporters(config: AppConfig, push: bool) -> List[ReporterProtocol]:
    reporters: List[ReporterProtocol] = [ConsoleReporter(console)]

    notifications = config.notifications
    if push and notifications.enabled:
        token = notifications.token or PushTokenStore().get_token(notifications.topic)
        reporters.append(
            PushNotifier(
                topic_url=notifications.get_topic_url(),
                token=token,
                title=notifications.title,
                timeout=config.polling.request_timeout_seconds,
            )
        )

    return reporters


def _build_watcher(
    config: AppConfig,
    *,
    mock: bool,
    push: bool,
    days: Optional[int],
    snapshot: Optional[Path],
) -> FreeSlotWatcher:
    if mock:
        client = MockRespaClient()
    else:
        client = RespaClient(
            base_url=config.api_base_url,
            timeout=config.polling.request_timeout_seconds
        )

    return FreeSlotWatcher(
        calendar_client=client,
        snapshot_store=JsonSnapshotStore(snapshot or config.snapshot_file),
        reporters=_build_reporters(config, push),
        resource_id=config.resource_id,
        timezone=config.timezone,
        lookahead_days=days or config.polling.lookahead_days,
        min_duration_minutes=config.min_duration_minutes,
    )


@app.command()
def check(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD), defaults to now")] = None,
    days: DaysOption = None,
    snapshot: SnapshotOption = None,
    no_push: NoPushOption = False,
    verbose: VerboseOption = False,
):
    """
    Check once for free slots and report the ones that are new.

    Examples:

        freeslotwatch check

        freeslotwatch check --start 2023-12-01 --days 7 --mock
    """
    setup_logging(verbose)
    config = _load_config(config_file)

    start_time = None
    if start:
        try:
            start_time = pendulum.from_format(start, "YYYY-MM-DD", tz=config.timezone).start_of("day")
        except ValueError as e:
            raise _fail(f"Could not parse start date: {e}")

    if mock:
        console.print("[yellow]⚠  Mock mode: using bundled calendar data[/yellow]\n")

    watcher = _build_watcher(config, mock=mock, push=not no_push, days=days, snapshot=snapshot)

    try:
        watcher.run_cycle(start=start_time)
    except FreeSlotError as e:
        raise _fail(e)


@app.command()
def watch(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    days: DaysOption = None,
    snapshot: SnapshotOption = None,
    interval: Annotated[Optional[int], typer.Option("--interval", min=1, help="Seconds between checks")] = None,
    retry_delay: Annotated[Optional[int], typer.Option("--retry-delay", min=1, help="Seconds to wait after a failed check")] = None,
    max_cycles: Annotated[Optional[int], typer.Option("--max-cycles", min=1, help="Stop after this many checks")] = None,
    no_push: NoPushOption = False,
    verbose: VerboseOption = False,
):
    """
    Keep checking for new free slots until interrupted.
    """
    setup_logging(verbose)
    config = _load_config(config_file)

    watcher = _build_watcher(config, mock=mock, push=not no_push, days=days, snapshot=snapshot)
    interval_seconds = interval or config.polling.interval_seconds

    console.print(
        f"[bold cyan]Watching resource {config.resource_id}[/bold cyan] "
        f"every {interval_seconds}s (Ctrl+C to stop)\n"
    )

    try:
        watcher.run_forever(
            interval_seconds=interval_seconds,
            retry_delay_seconds=retry_delay or config.polling.retry_delay_seconds,
            max_cycles=max_cycles,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


@app.command()
def show(
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
):
    """
    Show the free slots stored by the last check.
    """
    config = _load_config(config_file)
    store = JsonSnapshotStore(snapshot or config.snapshot_file)

    try:
        slots = store.load()
    except FreeSlotError as e:
        raise _fail(e)

    if not slots:
        console.print("[yellow]No free slots stored.[/yellow]")
        return

    table = Table(
        title=f"Free slots ({store.path})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Hours", justify="right", style="dim")

    for slot in slots:
        table.add_row(
            slot.date.isoformat(),
            slot.start.format("HH:mm"),
            slot.end.format("HH:mm"),
            f"{round(slot.duration_hours(), 2):g}"
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def set_push_token(
    config_file: ConfigOption = None,
    topic: Annotated[Optional[str], typer.Option("--topic", help="Topic to store the token for, defaults to the configured one")] = None,
):
    """
    Store the push notification access token in the system keyring.
    """
    config = _load_config(config_file)
    topic = topic or config.notifications.topic
    if not topic:
        raise _fail("No topic given and none configured under notifications.topic")

    token = typer.prompt("Access token", hide_input=True)

    try:
        PushTokenStore().set_token(topic, token)
    except KeyringError as e:
        raise _fail(f"Could not store token in keyring: {e}")

    console.print(f"\n[green]✓ Token stored for topic {topic}.[/green]\n")


@app.command()
def clear_push_token(
    config_file: ConfigOption = None,
    topic: Annotated[Optional[str], typer.Option("--topic", help="Topic to clear the token for, defaults to the configured one")] = None,
):
    """
    Remove the stored push notification access token.
    """
    config = _load_config(config_file)
    topic = topic or config.notifications.topic
    if not topic:
        raise _fail("No topic given and none configured under notifications.topic")

    try:
        removed = PushTokenStore().delete_token(topic)
    except KeyringError as e:
        raise _fail(f"Could not access keyring: {e}")

    if removed:
        console.print(f"\n[green]✓ Token for topic {topic} removed.[/green]\n")
    else:
        console.print(f"\n[yellow]No token stored for topic {topic}.[/yellow]\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freeslotwatch[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

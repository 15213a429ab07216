"""CLI command: authwatch watch — follow the auth log and record SSH sessions."""

from __future__ import annotations

import signal
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from authwatch.config import AuthWatchConfig, resolve_timezone
from authwatch.output import messages
from authwatch.output.writer import MonthlyLogWriter
from authwatch.parse.timestamps import TimestampResolver
from authwatch.session.manager import LoginMonitor
from authwatch.source.follow import FileFollower

console = Console(stderr=True)
echo_console = Console(highlight=False)


def apply_overrides(
    config: AuthWatchConfig,
    output_dir: str | None,
    timezone: str | None,
) -> AuthWatchConfig:
    if output_dir:
        config.output_dir = Path(output_dir)
    if timezone:
        try:
            resolve_timezone(timezone)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--timezone") from exc
        config.timezone = timezone
    return config


def build_monitor(config: AuthWatchConfig, source: Iterable[str]) -> LoginMonitor:
    """Wire a monitor for ``source`` using the configured zone and directory."""
    tz = config.tzinfo

    def clock() -> datetime:
        return datetime.now(tz)

    def on_message(message: str) -> None:
        style = "red" if "DESCONEXION" in message else "green"
        echo_console.print(message, style=style, markup=False, soft_wrap=True)

    return LoginMonitor(
        source=source,
        writer=MonthlyLogWriter(config.output_dir, clock=clock),
        resolver=TimestampResolver(tz, clock=clock),
        clock=clock,
        on_message=on_message,
    )


def print_summary(monitor: LoginMonitor, output_path: Path) -> None:
    stats = monitor.stats
    console.print(f"Reporte guardado en: {output_path}", markup=False, soft_wrap=True)

    console.print("\n[bold]Monitor Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Lines read", str(stats.lines))
    table.add_row("Connections", str(stats.starts))
    table.add_row("Disconnections", str(stats.matched))
    table.add_row("Without prior record", str(stats.unmatched))
    table.add_row("Open at exit", str(monitor.open_sessions))
    if stats.started_at is not None:
        table.add_row("Started", messages.stamp(stats.started_at))
    if stats.stopped_at is not None:
        table.add_row("Stopped", messages.stamp(stats.stopped_at))
    if stats.timestamp_errors:
        table.add_row("Bad timestamps", str(stats.timestamp_errors))
    if stats.write_errors:
        table.add_row("Write errors", f"[red]{stats.write_errors}[/red]")
    console.print(table)


@click.command()
@click.option(
    "--auth-log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Authentication log to follow (default /var/log/auth.log).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for loginlog_MM-YYYY.log files.",
)
@click.option("--timezone", "-z", default=None, help="IANA time zone name.")
@click.option(
    "--from-start",
    is_flag=True,
    help="Process lines already in the file before following it.",
)
@click.pass_context
def watch(
    ctx: click.Context,
    auth_log: str | None,
    output_dir: str | None,
    timezone: str | None,
    from_start: bool,
) -> None:
    """Follow the authentication log and record SSH sessions."""
    config: AuthWatchConfig = ctx.obj["config"]
    apply_overrides(config, output_dir, timezone)
    if auth_log:
        config.auth_log = Path(auth_log)
    if from_start:
        config.from_end = False

    follower = FileFollower(
        config.auth_log,
        poll_interval=config.poll_interval,
        from_end=config.from_end,
    )
    monitor = build_monitor(config, follower)

    console.print(
        f"[bold]authwatch[/bold] following [cyan]{config.auth_log}[/cyan] "
        f"({config.timezone})"
    )
    console.print(f"  Writing to: {monitor.output_path}", markup=False, soft_wrap=True)
    console.print("  Press Ctrl+C to stop.\n")

    def _signal_handler(signum: int, frame: object) -> None:
        console.print("\n[dim]Stopping...[/dim]")
        monitor.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        output_path = monitor.run()
    except KeyboardInterrupt:
        output_path = monitor.output_path

    print_summary(monitor, output_path)

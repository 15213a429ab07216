"""CLI command: authwatch replay FILE — process a finished log once."""

from __future__ import annotations

import click

from authwatch.cli.watch import apply_overrides, build_monitor, print_summary
from authwatch.config import AuthWatchConfig
from authwatch.source.follow import read_lines


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for loginlog_MM-YYYY.log files.",
)
@click.option("--timezone", "-z", default=None, help="IANA time zone name.")
@click.pass_context
def replay(
    ctx: click.Context,
    file: str,
    output_dir: str | None,
    timezone: str | None,
) -> None:
    """Run an existing auth log FILE through the session recorder."""
    config: AuthWatchConfig = ctx.obj["config"]
    apply_overrides(config, output_dir, timezone)

    monitor = build_monitor(config, read_lines(file))
    output_path = monitor.run()
    print_summary(monitor, output_path)

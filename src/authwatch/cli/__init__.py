"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from authwatch import __version__
from authwatch.config import AuthWatchConfig


@click.group()
@click.version_option(version=__version__, prog_name="authwatch")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """authwatch — SSH session activity log from the authentication log."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = AuthWatchConfig.load(config_path)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    config.verbose = config.verbose or verbose
    ctx.obj["config"] = config


def _register_commands() -> None:
    from authwatch.cli.replay import replay  # noqa: F811
    from authwatch.cli.watch import watch  # noqa: F811

    main.add_command(watch)
    main.add_command(replay)


_register_commands()

"""Root CLI group for mindlattice with global flags and command registration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from mindlattice import __version__
from mindlattice.commands import register_commands
from mindlattice.commands._context import AppContext
from mindlattice.config.settings import LatticeSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mindlattice")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-s",
    "--snapshot",
    "snapshot_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot file to load the lattice from (and --save back to).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    snapshot_path: Path | None,
) -> None:
    """mindlattice — in-memory anchor/link lattice CLI."""
    ctx.ensure_object(dict)
    extra: dict[str, Any] = {}
    if snapshot_path is not None:
        extra["snapshot_path"] = snapshot_path
    settings = LatticeSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **extra,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

"""Command group: lattice export (JSON snapshot, Graphviz DOT)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeGroup

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext
    from mindlattice.services.result import ServiceResult

_EXPORT_EXAMPLES = """\
  mindlattice -s lattice.json export
  mindlattice -s lattice.json export --format dot --output lattice.dot
  mindlattice -s lattice.json export json --output backup.json
  mindlattice -s lattice.json export dot | dot -Tpng -o lattice.png"""


@click.group(cls=LatticeGroup, invoke_without_command=True, examples=_EXPORT_EXAMPLES)
@click.option(
    "-f",
    "--format",
    "fmt",
    default=None,
    help="json or dot (default: [export] default_format).",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_context
def export(ctx: click.Context, fmt: str | None, output_file: str | None) -> None:
    """Export the lattice in portable formats.

    Without a subcommand the format comes from --format or the config.
    """
    if ctx.invoked_subcommand is not None:
        return
    from mindlattice.services.export import ExportService

    app: AppContext = ctx.obj
    _write_or_print(app, ExportService(app.lattice).export(fmt), output_file)


def _write_or_print(app: AppContext, result: ServiceResult, output_file: str | None) -> None:
    """Raw content to stdout, or to *output_file* with a summary result."""
    if not result.ok:
        app.emit(result)
        return

    if output_file:
        from mindlattice.infrastructure.snapshot import write_snapshot

        written = write_snapshot(Path(output_file), result.data["content"])
        data = {k: v for k, v in result.data.items() if k != "content"}
        data["output"] = str(written)
        app.emit(result.model_copy(update={"op": "export_file", "data": data}))
    elif app.settings.json_output:
        app.emit(result)
    else:
        click.echo(result.data["content"], nl=False)


@export.command(
    name="json",
    examples="""\
  mindlattice -s lattice.json export json
  mindlattice -s lattice.json export json --output backup.json""",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def json_(app: AppContext, output_file: str | None) -> None:
    """Snapshot document with version, epoch, nodes and links."""
    from mindlattice.services.export import ExportService

    _write_or_print(app, ExportService(app.lattice).export_json(), output_file)


@export.command(
    examples="""\
  mindlattice -s lattice.json export dot
  mindlattice -s lattice.json export dot --output lattice.dot""",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def dot(app: AppContext, output_file: str | None) -> None:
    """Graphviz DOT digraph of anchors and links."""
    from mindlattice.services.export import ExportService

    _write_or_print(app, ExportService(app.lattice).export_dot(), output_file)

"""Command: lattice integrity checking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeCommand

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext


@click.command(
    cls=LatticeCommand,
    examples="""\
  mindlattice -s lattice.json check
  mindlattice -s lattice.json check --errors-only
  mindlattice -s lattice.json check --min-severity error
  mindlattice -s lattice.json check --from a""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option(
    "--from",
    "start",
    default=None,
    help="Only report whether a cycle is reachable from this anchor.",
)
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool, start: str | None) -> None:
    """Check links, adjacency, orphans and cycles."""
    from mindlattice.services.check import CheckService

    svc = CheckService(app.lattice)

    if start is not None:
        app.emit(svc.acyclic_from(start))
    else:
        threshold = "error" if errors_only else min_severity
        app.emit(svc.check(min_severity=threshold))

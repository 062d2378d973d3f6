"""Command: move the lattice to its next epoch."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeCommand
from mindlattice.commands._context import save_options

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext


@click.command(
    "advance-epoch",
    cls=LatticeCommand,
    examples="""\
  mindlattice -s lattice.json advance-epoch --save""",
)
@save_options
@click.pass_obj
def advance_epoch(app: AppContext, save: bool, save_to: str | None) -> None:
    """Advance the epoch; anchors and links made afterwards carry the new one."""
    from mindlattice.services.create import CreateService

    result = CreateService(app.lattice).advance_epoch()
    app.emit(app.save(result, save=save, save_to=save_to))

"""Command: import a snapshot file into the lattice."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeCommand
from mindlattice.commands._context import save_options

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext


@click.command(
    cls=LatticeCommand,
    examples="""\
  mindlattice load backup.json --save-to lattice.json
  mindlattice -s lattice.json load extra.json --save
  mindlattice -s lattice.json load extra.json --partial --save""",
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--partial", is_flag=True, help="Load what succeeds and report failures.")
@save_options
@click.pass_obj
def load(app: AppContext, file: Path, partial: bool, save: bool, save_to: str | None) -> None:
    """Import the snapshot in FILE on top of the current lattice."""
    from mindlattice.domain.errors import LatticeError
    from mindlattice.infrastructure.snapshot import read_snapshot
    from mindlattice.services.create import CreateService
    from mindlattice.services.result import ServiceResult

    try:
        payload = read_snapshot(file)
    except LatticeError as exc:
        app.emit(ServiceResult.from_exception("load_snapshot", exc))
        return
    result = CreateService(app.lattice).load_snapshot(payload, partial=partial)
    app.emit(app.save(result, save=save, save_to=save_to))

"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. The lattice is built lazily, seeded from the
``--snapshot`` file when one is given, so ``--help`` never touches disk.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import click

from mindlattice.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mindlattice.config.settings import LatticeSettings
    from mindlattice.infrastructure.workspace import Lattice
    from mindlattice.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Per-invocation state: settings, the lattice and result emission."""

    def __init__(self, settings: LatticeSettings) -> None:
        self.settings = settings
        self._lattice: Lattice | None = None

        from mindlattice.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from mindlattice.services.telemetry import set_tracing

            set_tracing(True)

    @property
    def lattice(self) -> Lattice:
        """The lattice (created and seeded on first access)."""
        if self._lattice is None:
            from mindlattice.infrastructure.workspace import Lattice

            self._lattice = Lattice(self.settings)
            self._seed(self._lattice)
        return self._lattice

    def _seed(self, lattice: Lattice) -> None:
        """Load ``--snapshot`` into a fresh lattice; failures end the command."""
        path = self.settings.snapshot_path
        if path is None:
            return
        if not path.exists():
            logger.warning("Snapshot %s does not exist yet; starting empty", path)
            return

        from mindlattice.domain.errors import LatticeError
        from mindlattice.infrastructure.snapshot import read_snapshot
        from mindlattice.services.create import CreateService
        from mindlattice.services.result import ServiceResult

        try:
            payload = read_snapshot(path)
        except LatticeError as exc:
            self.emit(ServiceResult.from_exception("load_snapshot", exc))
            return
        result = CreateService(lattice).load_snapshot(payload)
        if not result.ok:
            self.emit(result)

    def save(self, result: ServiceResult, *, save: bool, save_to: str | None) -> ServiceResult:
        """Write the lattice back to disk after a successful mutation.

        ``--save`` targets the ``--snapshot`` file, ``--save-to`` any path.
        The written path is reported in ``result.data["saved_to"]``.
        """
        if not result.ok or not (save or save_to):
            return result
        target = Path(save_to) if save_to else self.settings.snapshot_path
        if target is None:
            raise click.UsageError("--save needs --snapshot FILE (or use --save-to PATH)")
        written = self.lattice.save(target)
        return result.model_copy(update={"data": {**result.data, "saved_to": str(written)}})

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout. Warnings go to stderr in human mode so they
          don't pollute piped output.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)


def save_options[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Add ``--save`` / ``--save-to`` to a mutating command."""
    func = click.option(
        "--save-to",
        type=click.Path(dir_okay=False),
        default=None,
        help="Write the resulting snapshot to this file.",
    )(func)
    func = click.option(
        "--save",
        is_flag=True,
        help="Write the resulting snapshot back to the --snapshot file.",
    )(func)
    return func

"""Subcommand modules for mindlattice.

Provides register_commands() which uses deferred imports to keep
``mindlattice --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    5 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from mindlattice.commands.anchor import anchor
    from mindlattice.commands.export import export
    from mindlattice.commands.graph import graph
    from mindlattice.commands.link import link
    from mindlattice.commands.query import query

    cli.add_command(anchor)
    cli.add_command(link)
    cli.add_command(query)
    cli.add_command(graph)
    cli.add_command(export)

    # --- Standalone commands ---
    from mindlattice.commands.check import check
    from mindlattice.commands.epoch import advance_epoch
    from mindlattice.commands.load import load

    cli.add_command(check)
    cli.add_command(advance_epoch)
    cli.add_command(load)

"""Command group: forge, sever and inspect links."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeGroup
from mindlattice.commands._context import save_options
from mindlattice.services.create import CreateService
from mindlattice.services.query import QueryService

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext

_LINK_EXAMPLES = """\
  mindlattice -s lattice.json link forge a b --save
  mindlattice -s lattice.json link sever lnk_0a1b2c3d --save
  mindlattice -s lattice.json link show lnk_0a1b2c3d"""


@click.group(cls=LatticeGroup, examples=_LINK_EXAMPLES)
@click.pass_obj
def link(app: AppContext) -> None:
    """Forge and sever directed links between anchors."""


@link.command(
    examples="""\
  mindlattice -s lattice.json link forge a b --save
  mindlattice -s lattice.json link forge a b --id a-b --kind 2 --save
  mindlattice -s lattice.json link forge a b --config-hash c0ffee --save"""
)
@click.argument("source")
@click.argument("target")
@click.option("--id", "link_id", default=None, help="Explicit link id (default: generated).")
@click.option("--kind", default=0, type=int, help="Link kind (non-negative).")
@click.option("--config-hash", default="", help="Hash of the config that produced the link.")
@save_options
@click.pass_obj
def forge(
    app: AppContext,
    source: str,
    target: str,
    link_id: str | None,
    kind: int,
    config_hash: str,
    save: bool,
    save_to: str | None,
) -> None:
    """Forge a link from SOURCE to TARGET."""
    result = CreateService(app.lattice).forge_link(
        source, target, link_id=link_id, kind=kind, config_hash=config_hash
    )
    app.emit(app.save(result, save=save, save_to=save_to))


@link.command(
    examples="""\
  mindlattice -s lattice.json link sever lnk_0a1b2c3d --save"""
)
@click.argument("link_id")
@save_options
@click.pass_obj
def sever(app: AppContext, link_id: str, save: bool, save_to: str | None) -> None:
    """Remove a link and detach it from both endpoints."""
    result = CreateService(app.lattice).sever_link(link_id)
    app.emit(app.save(result, save=save, save_to=save_to))


@link.command(
    examples="""\
  mindlattice -s lattice.json link show lnk_0a1b2c3d"""
)
@click.argument("link_id")
@click.pass_obj
def show(app: AppContext, link_id: str) -> None:
    """Show one link."""
    app.emit(QueryService(app.lattice).get_link(link_id))

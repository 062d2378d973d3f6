"""Command group: pin anchors, store recall, inspect anchors."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeGroup
from mindlattice.commands._context import save_options
from mindlattice.services.create import CreateService
from mindlattice.services.query import QueryService

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext

_ANCHOR_EXAMPLES = """\
  mindlattice -s lattice.json anchor pin "Root idea" --tier 3 --save
  mindlattice -s lattice.json anchor recall anc_1a2b3c4d --content "notes" --save
  mindlattice -s lattice.json anchor show anc_1a2b3c4d"""


@click.group(cls=LatticeGroup, examples=_ANCHOR_EXAMPLES)
@click.pass_obj
def anchor(app: AppContext) -> None:
    """Pin and inspect anchors."""


@anchor.command(
    examples="""\
  mindlattice -s lattice.json anchor pin "Root idea" --save
  mindlattice -s lattice.json anchor pin "Child" --id child --tier 2 --save
  mindlattice -s lattice.json anchor pin "Doc" --content "full text" --save
  mindlattice --json anchor pin "Scratch" --hash 9f86d081"""
)
@click.argument("label")
@click.option("--id", "anchor_id", default=None, help="Explicit anchor id (default: generated).")
@click.option("--content", default=None, help="Content to hash into the anchor.")
@click.option("--hash", "content_hash", default=None, help="Precomputed content hash.")
@click.option("--tier", default=0, type=int, help="Recall tier (clamped into 0-7).")
@save_options
@click.pass_obj
def pin(
    app: AppContext,
    label: str,
    anchor_id: str | None,
    content: str | None,
    content_hash: str | None,
    tier: int,
    save: bool,
    save_to: str | None,
) -> None:
    """Pin a new anchor with LABEL."""
    result = CreateService(app.lattice).pin_anchor(
        label,
        anchor_id=anchor_id,
        content=content,
        content_hash=content_hash,
        tier=tier,
    )
    app.emit(app.save(result, save=save, save_to=save_to))


@anchor.command(
    examples="""\
  mindlattice -s lattice.json anchor recall anc_1a2b3c4d --save
  mindlattice -s lattice.json anchor recall anc_1a2b3c4d --content "recalled text" --save"""
)
@click.argument("anchor_id")
@click.option("--content", default=None, help="Recalled content to hash.")
@click.option("--hash", "recall_hash", default=None, help="Precomputed recall hash.")
@save_options
@click.pass_obj
def recall(
    app: AppContext,
    anchor_id: str,
    content: str | None,
    recall_hash: str | None,
    save: bool,
    save_to: str | None,
) -> None:
    """Mark recall as stored for ANCHOR_ID (only once per anchor)."""
    result = CreateService(app.lattice).store_recall(
        anchor_id, content=content, recall_hash=recall_hash
    )
    app.emit(app.save(result, save=save, save_to=save_to))


@anchor.command(
    examples="""\
  mindlattice -s lattice.json anchor show anc_1a2b3c4d
  mindlattice -s lattice.json --json anchor show anc_1a2b3c4d"""
)
@click.argument("anchor_id")
@click.pass_obj
def show(app: AppContext, anchor_id: str) -> None:
    """Show one anchor with its links."""
    app.emit(QueryService(app.lattice).get_anchor(anchor_id))

"""Command group: search, filters and lattice summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeGroup
from mindlattice.services.query import QueryService

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext

_QUERY_EXAMPLES = """\
  mindlattice -s lattice.json query find "design"
  mindlattice -s lattice.json query find --tier 3 --recalled
  mindlattice -s lattice.json query links anc_1a2b3c4d --in
  mindlattice -s lattice.json query hash 9f86d081...
  mindlattice -s lattice.json query sorted --desc
  mindlattice -s lattice.json query epoch --since 2
  mindlattice -s lattice.json query stats"""


@click.group(cls=LatticeGroup, examples=_QUERY_EXAMPLES)
@click.pass_obj
def query(app: AppContext) -> None:
    """Search and filter anchors and links."""


@query.command(
    examples="""\
  mindlattice -s lattice.json query find
  mindlattice -s lattice.json query find "root"
  mindlattice -s lattice.json query find --tier 2
  mindlattice -s lattice.json query find --not-recalled
  mindlattice -s lattice.json -q query find idea"""
)
@click.argument("text", required=False, default=None)
@click.option("--tier", default=None, type=int, help="Only anchors with this tier.")
@click.option(
    "--recalled/--not-recalled",
    "recalled",
    default=None,
    help="Only anchors whose recall is (or is not) stored.",
)
@click.pass_obj
def find(app: AppContext, text: str | None, tier: int | None, recalled: bool | None) -> None:
    """Find anchors whose label contains TEXT (case-insensitive)."""
    app.emit(QueryService(app.lattice).find(text=text, tier=tier, recalled=recalled))


@query.command(
    examples="""\
  mindlattice -s lattice.json query links a
  mindlattice -s lattice.json query links b --in"""
)
@click.argument("anchor_id")
@click.option("--in", "incoming", is_flag=True, help="Links entering the anchor instead.")
@click.pass_obj
def links(app: AppContext, anchor_id: str, incoming: bool) -> None:
    """List links leaving (or entering) ANCHOR_ID."""
    direction = "in" if incoming else "out"
    app.emit(QueryService(app.lattice).links(anchor_id, direction=direction))


@query.command(
    name="hash",
    examples="""\
  mindlattice -s lattice.json query hash 2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824""",
)
@click.argument("content_hash")
@click.pass_obj
def hash_(app: AppContext, content_hash: str) -> None:
    """Find the first anchor pinned with CONTENT_HASH."""
    app.emit(QueryService(app.lattice).by_content_hash(content_hash))


@query.command(
    name="sorted",
    examples="""\
  mindlattice -s lattice.json query sorted
  mindlattice -s lattice.json query sorted --desc""",
)
@click.option("--desc", is_flag=True, help="Newest first.")
@click.pass_obj
def sorted_(app: AppContext, desc: bool) -> None:
    """List anchors by pin time (oldest first; ties keep pin order)."""
    app.emit(QueryService(app.lattice).sorted_by_pinned(ascending=not desc))


@query.command(
    examples="""\
  mindlattice -s lattice.json query epoch --epoch 0
  mindlattice -s lattice.json query epoch --since 3
  mindlattice -s lattice.json query epoch --after 2026-01-01 --before 2026-02-01T12:00:00"""
)
@click.option("--epoch", default=None, type=int, help="Pinned in exactly this epoch.")
@click.option("--since", "since_epoch", default=None, type=int, help="Pinned in this epoch or later.")
@click.option("--after", "pinned_after", default=None, help="Pinned at or after (ISO 8601).")
@click.option("--before", "pinned_before", default=None, help="Pinned at or before (ISO 8601).")
@click.pass_obj
def epoch(
    app: AppContext,
    epoch: int | None,
    since_epoch: int | None,
    pinned_after: str | None,
    pinned_before: str | None,
) -> None:
    """Filter anchors by pin epoch or pin-time window."""
    app.emit(
        QueryService(app.lattice).epoch_filter(
            epoch=epoch,
            since_epoch=since_epoch,
            pinned_after=pinned_after,
            pinned_before=pinned_before,
        )
    )


@query.command(
    examples="""\
  mindlattice -s lattice.json query stats
  mindlattice -s lattice.json --json query stats"""
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Counts, capacity, epoch and orphan total."""
    app.emit(QueryService(app.lattice).stats())

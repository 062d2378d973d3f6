"""Command group: traversal, degrees and text rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindlattice.commands._base import LatticeGroup
from mindlattice.services.graph import GraphService

if TYPE_CHECKING:
    from mindlattice.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  mindlattice -s lattice.json graph traverse a --depth 2
  mindlattice -s lattice.json graph traverse c --in
  mindlattice -s lattice.json graph degree
  mindlattice -s lattice.json graph render a
  mindlattice -s lattice.json graph map"""


@click.group(cls=LatticeGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Walk and draw the lattice."""


@graph.command(
    examples="""\
  mindlattice -s lattice.json graph traverse a
  mindlattice -s lattice.json graph traverse a --depth 1
  mindlattice -s lattice.json -q graph traverse c --in"""
)
@click.argument("start")
@click.option("--depth", default=None, type=int, help="Max levels (capped at 64).")
@click.option("--in", "incoming", is_flag=True, help="Follow links backwards.")
@click.pass_obj
def traverse(app: AppContext, start: str, depth: int | None, incoming: bool) -> None:
    """Breadth-first walk from START."""
    direction = "in" if incoming else "out"
    app.emit(GraphService(app.lattice).traverse(start, depth=depth, direction=direction))


@graph.command(
    examples="""\
  mindlattice -s lattice.json graph degree"""
)
@click.pass_obj
def degree(app: AppContext) -> None:
    """In- and out-degree of every anchor."""
    app.emit(GraphService(app.lattice).degrees())


@graph.command(
    examples="""\
  mindlattice -s lattice.json graph render a
  mindlattice -s lattice.json -q graph render a > tree.txt"""
)
@click.argument("start")
@click.pass_obj
def render(app: AppContext, start: str) -> None:
    """Indented text tree of everything reachable from START."""
    app.emit(GraphService(app.lattice).render_from(start))


@graph.command(
    name="map",
    examples="""\
  mindlattice -s lattice.json graph map""",
)
@click.pass_obj
def map_(app: AppContext) -> None:
    """One text tree per anchor, in pin order."""
    app.emit(GraphService(app.lattice).render_map())

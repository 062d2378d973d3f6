"""GraphEngine — lazy-built NetworkX view of the lattice store.

The store stays the source of truth; the graph is a read-only copy built
on first access. It is rebuilt when the store revision moves on, or after
:meth:`GraphEngine.invalidate`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from mindlattice.lattice.store import LatticeStore

type _Graph = nx.MultiDiGraph


class GraphEngine:
    """Lazy-loading graph view backed by a :class:`LatticeStore`."""

    def __init__(self, store: LatticeStore) -> None:
        self._store = store
        self._graph: _Graph | None = None
        self._built_at = -1

    @property
    def graph(self) -> _Graph:
        """Return the graph, rebuilding it if the store changed since."""
        revision = self._store.revision
        if self._graph is None or revision != self._built_at:
            self._graph = self._build_from_store()
            self._built_at = revision
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build_from_store(self) -> _Graph:
        """Build a MultiDiGraph keyed by link id.

        Anchors are added first so isolated anchors appear in the graph.
        Parallel links between the same pair stay distinct edges.
        """
        g: _Graph = nx.MultiDiGraph()
        with self._store.locked():
            for anchor in self._store.anchors():
                g.add_node(
                    anchor.id,
                    label=anchor.label,
                    tier=anchor.tier,
                    recall_stored=anchor.recall_stored,
                )
            for link in self._store.links():
                g.add_edge(link.source, link.target, key=link.id, kind=link.kind)
        return g

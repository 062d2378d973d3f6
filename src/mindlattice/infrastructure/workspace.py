"""Lattice — the single dependency injected into every service.

Bundles the :class:`LatticeStore`, the settings it was built from, and
the lazy NetworkX view. Writes go through :meth:`Lattice.mutation` so the
graph view is invalidated whether or not the write succeeds.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from mindlattice.infrastructure.graph.engine import GraphEngine
from mindlattice.infrastructure.snapshot import read_snapshot, write_snapshot
from mindlattice.lattice.renderer import LatticeRenderer
from mindlattice.lattice.serializer import LoadReport, load_payload, to_json
from mindlattice.lattice.store import LatticeStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from mindlattice.config.settings import LatticeSettings

logger = logging.getLogger(__name__)


class Lattice:
    """Store + settings + graph view for one process."""

    def __init__(self, settings: LatticeSettings, store: LatticeStore | None = None) -> None:
        self._settings = settings
        self._store = store or LatticeStore(capacity=settings.lattice.capacity)
        self._graph = GraphEngine(self._store)

    @property
    def settings(self) -> LatticeSettings:
        return self._settings

    @property
    def store(self) -> LatticeStore:
        return self._store

    @property
    def graph(self) -> GraphEngine:
        return self._graph

    @property
    def max_depth(self) -> int:
        return self._settings.lattice.max_depth

    def renderer(self) -> LatticeRenderer:
        render = self._settings.render
        return LatticeRenderer(self._store, max_depth=render.max_depth, indent=render.indent)

    @contextmanager
    def mutation(self) -> Iterator[LatticeStore]:
        """Yield the store for writing; the graph view is dropped afterwards."""
        try:
            yield self._store
        finally:
            self._graph.invalidate()

    # ------------------------------------------------------------------
    # Snapshot files
    # ------------------------------------------------------------------

    def load(self, path: Path, *, partial: bool = False) -> LoadReport:
        """Import the snapshot document at *path* into the store."""
        payload = read_snapshot(path)
        with self.mutation() as store:
            report = load_payload(store, payload, partial=partial)
        logger.debug(
            "Loaded snapshot %s: %d anchors, %d links", path, report.anchors, report.links
        )
        return report

    def save(self, path: Path) -> Path:
        """Export the store to *path* as a snapshot document."""
        return write_snapshot(path, to_json(self._store, indent=self._settings.export.indent))

"""GraphService — traversal, degree analysis and text rendering.

Breadth-first traversal and degree counts come from
:mod:`mindlattice.lattice.traversal`; rendering from
:class:`~mindlattice.lattice.renderer.LatticeRenderer` configured by the
``[render]`` settings section.
"""

from __future__ import annotations

from typing import Any, Literal

from mindlattice.lattice import traversal
from mindlattice.services.base import BaseService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import trace_span, traced

Direction = Literal["out", "in"]


class GraphService(BaseService):
    """Handles traversals and renders over the lattice."""

    @traced
    def traverse(
        self,
        start: str,
        *,
        depth: int | None = None,
        direction: Direction = "out",
    ) -> ServiceResult:
        """Breadth-first walk from *start*.

        A missing start anchor is not an error: the walk is just empty.

        Args:
            start: Anchor id to start from.
            depth: Level cap; defaults to ``[lattice] max_depth``. Never
                more than 64.
            direction: ``out`` follows links forward, ``in`` backward.
        """
        requested = self._lattice.max_depth if depth is None else depth
        walk = traversal.traverse_out if direction == "out" else traversal.traverse_in
        with trace_span("bfs") as span:
            anchors = walk(self._store, start, requested)
            if span:
                span.annotate("visited", len(anchors))

        items: list[dict[str, Any]] = [
            {"id": a.id, "label": a.label, "tier": a.tier} for a in anchors
        ]
        return ServiceResult(
            ok=True,
            op="traverse",
            data={
                "start": start,
                "direction": direction,
                "depth": traversal.effective_depth(requested),
                "count": len(items),
                "items": items,
            },
        )

    @traced
    def degrees(self) -> ServiceResult:
        """In- and out-degree of every anchor, in pin order."""
        with self._store.locked():
            out_deg = traversal.degree_out(self._store)
            in_deg = traversal.degree_in(self._store)
            labels = {a.id: a.label for a in self._store.anchors()}

        items = [
            {
                "id": anchor_id,
                "label": labels.get(anchor_id, ""),
                "out": out_deg[anchor_id],
                "in": in_deg.get(anchor_id, 0),
            }
            for anchor_id in out_deg
        ]
        return ServiceResult(ok=True, op="degrees", data={"count": len(items), "items": items})

    @traced
    def render_from(self, start: str) -> ServiceResult:
        """Text tree of everything reachable from *start*."""
        if not self._store.has_anchor(start):
            return self._not_found("render", f"Anchor not found: {start}", id=start)
        text = self._lattice.renderer().render_from(start)
        return ServiceResult(ok=True, op="render", data={"start": start, "content": text})

    @traced
    def render_map(self) -> ServiceResult:
        """One text tree per anchor, in pin order."""
        text = self._lattice.renderer().render_full_map()
        return ServiceResult(
            ok=True,
            op="render_map",
            data={"roots": self._store.anchor_count, "content": text},
        )

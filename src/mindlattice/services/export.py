"""ExportService — JSON snapshot and Graphviz DOT export.

Content is returned as a string in ``data["content"]``; writing it to a
file is the caller's job.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from mindlattice.lattice import serializer
from mindlattice.services.base import BaseService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import traced

EXPORT_FORMATS = ("json", "dot")


class ExportService(BaseService):
    """Export the lattice in portable formats."""

    @traced
    def export(self, fmt: str | None = None) -> ServiceResult:
        """Dispatch on *fmt* (defaults to ``[export] default_format``)."""
        fmt = (fmt or self._lattice.settings.export.default_format).lower()
        if fmt == "json":
            return self.export_json()
        if fmt == "dot":
            return self.export_dot()
        return ServiceResult.failure(
            "export",
            "INVALID_FORMAT",
            f"Unknown export format: {fmt}",
            format=fmt,
            valid=list(EXPORT_FORMATS),
        )

    @traced
    def export_json(self) -> ServiceResult:
        """Serializer document: version, epoch, nodes and links."""
        store = self._store
        with store.locked():
            content = serializer.to_json(store, indent=self._lattice.settings.export.indent)
            counts = {"node_count": store.anchor_count, "link_count": store.link_count}
        return ServiceResult(
            ok=True,
            op="export_json",
            data={"format": "json", "content": content, **counts},
        )

    @traced
    def export_dot(self) -> ServiceResult:
        """Graphviz DOT built from the NetworkX view."""
        g = self._lattice.graph.graph
        return ServiceResult(
            ok=True,
            op="export_dot",
            data={
                "format": "dot",
                "content": self._to_dot(g),
                "node_count": g.number_of_nodes(),
                "link_count": g.number_of_edges(),
            },
        )

    @staticmethod
    def _to_dot(g: nx.MultiDiGraph[Any]) -> str:
        lines = ["digraph lattice {", "  rankdir=LR;", "  node [shape=box];"]

        for node_id, attrs in g.nodes(data=True):
            label = f"[T{attrs.get('tier', 0)}] {attrs.get('label', node_id)}"
            lines.append(f'  "{_dot_escape(node_id)}" [label="{_dot_escape(label)}"];')

        for src, tgt, key, attrs in g.edges(keys=True, data=True):
            lines.append(
                f'  "{_dot_escape(src)}" -> "{_dot_escape(tgt)}"'
                f' [id="{_dot_escape(key)}" label="{attrs.get("kind", 0)}"];'
            )

        lines.append("}")
        return "\n".join(lines) + "\n"


def _dot_escape(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")

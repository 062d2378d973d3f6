"""CheckService — structural integrity of the lattice.

Linter pattern: one pass, a flat list of issues, each with a severity and
a category. Nothing is repaired.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from mindlattice.lattice import validator
from mindlattice.services.base import BaseService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import trace_span, traced

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

_SEVERITY_RANK = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}

CAT_REFERENTIAL = "referential_integrity"
CAT_ADJACENCY = "adjacency_consistency"
CAT_ORPHANS = "orphan_anchors"
CAT_CYCLES = "cycles"


def _issue(category: str, severity: str, message: str, **detail: Any) -> dict[str, Any]:
    return {"category": category, "severity": severity, "message": message, "detail": detail}


class CheckService(BaseService):
    """Reports dangling links, adjacency drift, orphans and cycles."""

    @traced
    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Run every check and report issues at or above *min_severity*."""
        issues: list[dict[str, Any]] = []
        store = self._store
        with store.locked():
            with trace_span(CAT_REFERENTIAL):
                issues.extend(self._check_dangling_links())
            with trace_span(CAT_ADJACENCY):
                issues.extend(self._check_adjacency())
            with trace_span(CAT_ORPHANS):
                issues.extend(self._check_orphans())
            with trace_span(CAT_CYCLES):
                issues.extend(self._check_cycles())
            total_edges = validator.total_edges(store)
            anchors = store.anchor_count

        threshold = _SEVERITY_RANK.get(min_severity, 0)
        issues = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": issues,
                "count": len(issues),
                "anchors": anchors,
                "total_edges": total_edges,
            },
        )

    @traced
    def acyclic_from(self, start: str) -> ServiceResult:
        """Whether a cycle is reachable from *start* along out-links."""
        if not self._store.has_anchor(start):
            return self._not_found("acyclic_from", f"Anchor not found: {start}", id=start)
        return ServiceResult(
            ok=True,
            op="acyclic_from",
            data={"start": start, "acyclic": validator.is_acyclic_from(self._store, start)},
        )

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def _check_dangling_links(self) -> list[dict[str, Any]]:
        return [
            _issue(
                CAT_REFERENTIAL,
                SEVERITY_ERROR,
                f"Link {link_id} points at a missing anchor",
                link_id=link_id,
            )
            for link_id in validator.dangling_links(self._store)
        ]

    def _check_adjacency(self) -> list[dict[str, Any]]:
        """Every adjacency id must name a link with that anchor as endpoint."""
        issues: list[dict[str, Any]] = []
        store = self._store
        for anchor in store.anchors():
            for link_id in sorted(anchor.out_links):
                link = store.get_link(link_id)
                if link is None or link.source != anchor.id:
                    issues.append(
                        _issue(
                            CAT_ADJACENCY,
                            SEVERITY_ERROR,
                            f"Anchor {anchor.id} lists stale out-link {link_id}",
                            anchor_id=anchor.id,
                            link_id=link_id,
                        )
                    )
            for link_id in sorted(anchor.in_links):
                link = store.get_link(link_id)
                if link is None or link.target != anchor.id:
                    issues.append(
                        _issue(
                            CAT_ADJACENCY,
                            SEVERITY_ERROR,
                            f"Anchor {anchor.id} lists stale in-link {link_id}",
                            anchor_id=anchor.id,
                            link_id=link_id,
                        )
                    )
        return issues

    def _check_orphans(self) -> list[dict[str, Any]]:
        return [
            _issue(CAT_ORPHANS, SEVERITY_WARNING, f"Anchor {anchor_id} has no links", id=anchor_id)
            for anchor_id in validator.orphan_anchors(self._store)
        ]

    def _check_cycles(self) -> list[dict[str, Any]]:
        """One warning naming a sample cycle when the lattice is not acyclic."""
        if validator.is_acyclic(self._store):
            return []
        try:
            edges = nx.find_cycle(self._lattice.graph.graph, orientation="original")
        except nx.NetworkXNoCycle:
            edges = []
        path = [edge[0] for edge in edges]
        return [
            _issue(
                CAT_CYCLES,
                SEVERITY_WARNING,
                "Lattice contains a cycle" + (f": {' -> '.join([*path, path[0]])}" if path else ""),
                anchors=path,
            )
        ]

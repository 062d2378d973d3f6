"""Depth-first text rendering of reachable sub-lattices.

Output is for humans only; it is not meant to be parsed back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mindlattice.lattice.store import MAX_NODE_DEPTH

if TYPE_CHECKING:
    from mindlattice.domain.models import Anchor
    from mindlattice.lattice.store import LatticeStore

DEFAULT_INDENT = "  "


class LatticeRenderer:
    """Pre-order tree dump following out-links.

    Each line reads ``[T{tier}] {label} ({id})`` indented by
    ``depth * indent``. An anchor printed once in a traversal is never
    printed again, so cycles terminate.
    """

    def __init__(
        self,
        store: LatticeStore,
        max_depth: int = MAX_NODE_DEPTH,
        indent: str = DEFAULT_INDENT,
    ) -> None:
        self._store = store
        self._max_depth = max(0, min(max_depth, MAX_NODE_DEPTH))
        self._indent = indent

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def format_line(self, anchor: Anchor, depth: int) -> str:
        return f"{self._indent * depth}[T{anchor.tier}] {anchor.label} ({anchor.id})"

    def render_from(self, start: str) -> str:
        """Render the tree reachable from *start*; empty string if unknown."""
        with self._store.locked():
            return "\n".join(self._lines_from(start))

    def render_full_map(self) -> str:
        """One tree per anchor in pin order, each under a ``--- Root`` header."""
        blocks: list[str] = []
        with self._store.locked():
            for anchor_id in self._store.anchor_ids():
                lines = [f"--- Root: {anchor_id} ---", *self._lines_from(anchor_id)]
                blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    def _lines_from(self, start: str) -> list[str]:
        root = self._store.get_anchor(start)
        if root is None:
            return []

        lines: list[str] = []
        printed: set[str] = set()
        # Explicit stack of (anchor, depth); children pushed in reverse so
        # they pop in sorted link-id order.
        stack: list[tuple[Anchor, int]] = [(root, 0)]
        while stack:
            anchor, depth = stack.pop()
            if anchor.id in printed:
                continue
            printed.add(anchor.id)
            lines.append(self.format_line(anchor, depth))
            if depth >= self._max_depth:
                continue

            children: list[Anchor] = []
            for link_id in sorted(anchor.out_links):
                link = self._store.get_link(link_id)
                if link is None:
                    continue
                child = self._store.get_anchor(link.target)
                if child is not None and child.id not in printed:
                    children.append(child)
            stack.extend((child, depth + 1) for child in reversed(children))
        return lines

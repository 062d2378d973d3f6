"""Read-only queries and traversals over a :class:`LatticeStore`.

Every function takes the store as its first argument and holds the store
lock while it reads, so results reflect one consistent state.

Neighbor expansion always follows sorted link-id order, which makes BFS
discovery order reproducible across runs and platforms.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from mindlattice.lattice.store import MAX_NODE_DEPTH

if TYPE_CHECKING:
    from mindlattice.domain.models import Anchor, Link
    from mindlattice.lattice.store import LatticeStore


# ---------------------------------------------------------------------------
# Search and filters
# ---------------------------------------------------------------------------


def find_by_label_contains(store: LatticeStore, substring: str | None) -> list[Anchor]:
    """Case-insensitive substring search. Empty or ``None`` matches everything."""
    anchors = store.anchors()
    if not substring:
        return anchors
    needle = substring.casefold()
    return [a for a in anchors if needle in a.label.casefold()]


def find_by_recall_tier(store: LatticeStore, tier: int) -> list[Anchor]:
    return [a for a in store.anchors() if a.tier == tier]


def find_by_recall_stored(store: LatticeStore, stored: bool) -> list[Anchor]:
    return [a for a in store.anchors() if a.recall_stored is stored]


def find_links_from(store: LatticeStore, anchor_id: str) -> list[Link]:
    return [link for link in store.links() if link.source == anchor_id]


def find_links_to(store: LatticeStore, anchor_id: str) -> list[Link]:
    return [link for link in store.links() if link.target == anchor_id]


def anchor_by_content_hash(store: LatticeStore, content_hash: str) -> Anchor | None:
    """First anchor (in pin order) carrying *content_hash*, if any."""
    for anchor in store.anchors():
        if anchor.content_hash == content_hash:
            return anchor
    return None


def sort_by_pinned_time(store: LatticeStore, *, ascending: bool = True) -> list[Anchor]:
    """Stable sort on ``pinned_at``; ties keep pin order in both directions."""
    return sorted(store.anchors(), key=lambda a: a.pinned_at, reverse=not ascending)


# ---------------------------------------------------------------------------
# Epoch filter
# ---------------------------------------------------------------------------


def find_pinned_in_epoch(store: LatticeStore, epoch: int) -> list[Anchor]:
    return [a for a in store.anchors() if a.epoch == epoch]


def find_pinned_since_epoch(store: LatticeStore, epoch: int) -> list[Anchor]:
    return [a for a in store.anchors() if a.epoch >= epoch]


def find_pinned_between(
    store: LatticeStore,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Anchor]:
    """Anchors whose ``pinned_at`` lies in the inclusive ``[start, end]`` window."""
    return [
        a
        for a in store.anchors()
        if (start is None or a.pinned_at >= start) and (end is None or a.pinned_at <= end)
    ]


# ---------------------------------------------------------------------------
# Degrees
# ---------------------------------------------------------------------------


def degree_out(store: LatticeStore) -> dict[str, int]:
    return {a.id: len(a.out_links) for a in store.anchors()}


def degree_in(store: LatticeStore) -> dict[str, int]:
    return {a.id: len(a.in_links) for a in store.anchors()}


# ---------------------------------------------------------------------------
# Breadth-first traversal
# ---------------------------------------------------------------------------


def effective_depth(max_depth: int) -> int:
    """Clamp a requested depth into ``[0, MAX_NODE_DEPTH]``."""
    return max(0, min(max_depth, MAX_NODE_DEPTH))


def traverse_out(store: LatticeStore, start: str, max_depth: int) -> list[Anchor]:
    """BFS along out-links, at most ``min(max_depth, 64)`` levels from *start*."""
    return _bfs(store, start, max_depth, store.out_link_ids, lambda link: link.target)


def traverse_in(store: LatticeStore, start: str, max_depth: int) -> list[Anchor]:
    """BFS along in-links (edges followed in reverse)."""
    return _bfs(store, start, max_depth, store.in_link_ids, lambda link: link.source)


def _bfs(
    store: LatticeStore,
    start: str,
    max_depth: int,
    adjacent: Callable[[str], list[str]],
    far_end: Callable[[Link], str],
) -> list[Anchor]:
    depth_cap = effective_depth(max_depth)
    with store.locked():
        root = store.get_anchor(start)
        if root is None:
            return []

        order: list[Anchor] = [root]
        seen: set[str] = {start}
        queue: deque[tuple[str, int]] = deque([(start, 0)])

        while queue:
            anchor_id, depth = queue.popleft()
            if depth >= depth_cap:
                continue
            for link_id in adjacent(anchor_id):
                link = store.get_link(link_id)
                if link is None:
                    continue
                neighbor_id = far_end(link)
                if neighbor_id in seen:
                    continue
                neighbor = store.get_anchor(neighbor_id)
                if neighbor is None:
                    continue
                seen.add(neighbor_id)
                order.append(neighbor)
                queue.append((neighbor_id, depth + 1))
        return order

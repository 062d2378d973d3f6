"""Structural integrity checks over a :class:`LatticeStore`."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mindlattice.lattice.store import LatticeStore


def dangling_links(store: LatticeStore) -> list[str]:
    """Ids of links whose source or target no longer resolves to an anchor."""
    with store.locked():
        return [
            link.id
            for link in store.links()
            if not store.has_anchor(link.source) or not store.has_anchor(link.target)
        ]


def all_links_have_anchors(store: LatticeStore) -> bool:
    return not dangling_links(store)


def orphan_anchors(store: LatticeStore) -> list[str]:
    """Ids of anchors with no incoming and no outgoing links, in pin order."""
    return [a.id for a in store.anchors() if a.is_orphan]


def total_edges(store: LatticeStore) -> int:
    return store.link_count


def is_acyclic_from(store: LatticeStore, start: str) -> bool:
    """True iff no cycle is reachable from *start* along out-links.

    Cycles in parts of the lattice that *start* cannot reach are not seen;
    use :func:`is_acyclic` for the whole lattice.
    """
    with store.locked():
        return _acyclic_from(store, start, set())


def is_acyclic(store: LatticeStore) -> bool:
    """Whole-lattice check: every anchor is tried as a root."""
    finished: set[str] = set()
    with store.locked():
        for anchor_id in store.anchor_ids():
            if anchor_id in finished:
                continue
            if not _acyclic_from(store, anchor_id, finished):
                return False
    return True


def _acyclic_from(store: LatticeStore, start: str, finished: set[str]) -> bool:
    """Iterative DFS with an explicit recursion stack.

    *finished* collects anchors whose descendants are fully explored and
    cycle-free; it may be shared between calls to skip known-good subtrees.
    """
    if not store.has_anchor(start) or start in finished:
        return True

    on_stack: set[str] = {start}
    # Each frame: (anchor id, iterator over the ids of its successors).
    frames = [(start, iter(_successors(store, start)))]
    while frames:
        anchor_id, successors = frames[-1]
        advanced = False
        for successor in successors:
            if successor in on_stack:
                return False
            if successor in finished or not store.has_anchor(successor):
                continue
            on_stack.add(successor)
            frames.append((successor, iter(_successors(store, successor))))
            advanced = True
            break
        if not advanced:
            frames.pop()
            on_stack.discard(anchor_id)
            finished.add(anchor_id)
    return True


def _successors(store: LatticeStore, anchor_id: str) -> list[str]:
    targets: list[str] = []
    for link_id in store.out_link_ids(anchor_id):
        link = store.get_link(link_id)
        if link is not None:
            targets.append(link.target)
    return targets

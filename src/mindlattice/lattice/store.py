"""LatticeStore — single source of truth for anchors and links.

All state sits behind one re-entrant lock, so every public operation is
atomic, including the composite ones:

- ``pin_anchor``: capacity check + duplicate check + insert.
- ``forge_link``: endpoint check + insert + both adjacency updates.
- ``sever_link``: delete + both adjacency updates.

Readers that need a consistent view across several calls (traversal,
rendering, validation, export) hold :meth:`LatticeStore.locked` for the
duration of the walk.

INVARIANT: ``anchor.out_links`` / ``anchor.in_links`` are exactly the ids
of the links whose ``source`` / ``target`` is that anchor.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from mindlattice.domain.errors import (
    AlreadyStoredError,
    CapacityExceededError,
    DuplicateIdError,
    InvalidArgumentError,
    NotFoundError,
)
from mindlattice.domain.models import Anchor, Link, clamp_tier, truncate_label

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4096
MAX_NODE_DEPTH = 64


def _utc_now() -> datetime:
    return datetime.now(UTC)


class LatticeStore:
    """In-memory, thread-safe anchor/link store.

    Anchors and links live in insertion-ordered dicts, which doubles as the
    ordered id list used for deterministic iteration.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if capacity < 0:
            msg = f"capacity must be non-negative, got {capacity}"
            raise InvalidArgumentError(msg, capacity=capacity)
        self._capacity = capacity
        self._clock = clock
        self._lock = threading.RLock()
        self._anchors: dict[str, Anchor] = {}
        self._links: dict[str, Link] = {}
        self._epoch = 0
        self._revision = 0

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextmanager
    def locked(self) -> Iterator[LatticeStore]:
        """Hold the store lock for a consistent multi-call read."""
        with self._lock:
            yield self

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def revision(self) -> int:
        """Bumped on every anchor or link write."""
        with self._lock:
            return self._revision

    @property
    def epoch(self) -> int:
        with self._lock:
            return self._epoch

    @property
    def anchor_count(self) -> int:
        with self._lock:
            return len(self._anchors)

    @property
    def link_count(self) -> int:
        with self._lock:
            return len(self._links)

    def advance_epoch(self) -> int:
        """Move the lattice one generation forward and return the new epoch."""
        with self._lock:
            self._epoch += 1
            logger.debug("Epoch advanced to %d", self._epoch)
            return self._epoch

    def restore_epoch(self, epoch: int) -> None:
        """Set the epoch when importing a snapshot. It never moves backwards."""
        with self._lock:
            if epoch < self._epoch:
                msg = f"Cannot rewind epoch from {self._epoch} to {epoch}"
                raise InvalidArgumentError(msg, epoch=epoch)
            self._epoch = epoch

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    def pin_anchor(
        self,
        anchor_id: str,
        label: str,
        content_hash: str = "",
        tier: int = 0,
        *,
        epoch: int | None = None,
        pinned_at: datetime | None = None,
    ) -> Anchor:
        """Create an anchor.

        *epoch* and *pinned_at* default to the current epoch and clock; a
        snapshot import passes the recorded stamps instead.

        Raises:
            CapacityExceededError: The store already holds ``capacity`` anchors.
            InvalidArgumentError: *anchor_id* is empty.
            DuplicateIdError: *anchor_id* is already pinned.
        """
        with self._lock:
            if len(self._anchors) >= self._capacity:
                msg = f"Lattice is full ({self._capacity} anchors)"
                raise CapacityExceededError(msg, capacity=self._capacity)
            if not anchor_id:
                raise InvalidArgumentError("Anchor id must not be empty")
            if anchor_id in self._anchors:
                msg = f"Anchor already pinned: {anchor_id}"
                raise DuplicateIdError(msg, id=anchor_id)

            anchor = Anchor(
                id=anchor_id,
                label=truncate_label(label or ""),
                content_hash=content_hash or "",
                tier=clamp_tier(tier),
                pinned_at=pinned_at if pinned_at is not None else self._clock(),
                epoch=self._epoch if epoch is None else epoch,
            )
            self._anchors[anchor_id] = anchor
            self._revision += 1
            logger.debug("Pinned anchor %s (tier %d)", anchor_id, anchor.tier)
            return anchor.copy()

    def store_recall(self, anchor_id: str, recall_hash: str) -> Anchor:
        """Record that recall was stored for *anchor_id*. Allowed once.

        Raises:
            NotFoundError: No such anchor.
            AlreadyStoredError: Recall was already stored.
        """
        with self._lock:
            anchor = self._anchors.get(anchor_id)
            if anchor is None:
                msg = f"Anchor not found: {anchor_id}"
                raise NotFoundError(msg, id=anchor_id)
            if anchor.recall_stored:
                msg = f"Recall already stored for anchor: {anchor_id}"
                raise AlreadyStoredError(msg, id=anchor_id)
            anchor.recall_stored = True
            anchor.recall_hash = recall_hash
            self._revision += 1
            return anchor.copy()

    def get_anchor(self, anchor_id: str) -> Anchor | None:
        with self._lock:
            anchor = self._anchors.get(anchor_id)
            return anchor.copy() if anchor is not None else None

    def has_anchor(self, anchor_id: str) -> bool:
        with self._lock:
            return anchor_id in self._anchors

    def anchors(self) -> list[Anchor]:
        """Snapshot of all anchors in pin order."""
        with self._lock:
            return [a.copy() for a in self._anchors.values()]

    def anchor_ids(self) -> list[str]:
        with self._lock:
            return list(self._anchors)

    def out_link_ids(self, anchor_id: str) -> list[str]:
        """Sorted ids of links leaving *anchor_id* (empty if unknown)."""
        with self._lock:
            anchor = self._anchors.get(anchor_id)
            return sorted(anchor.out_links) if anchor is not None else []

    def in_link_ids(self, anchor_id: str) -> list[str]:
        """Sorted ids of links entering *anchor_id* (empty if unknown)."""
        with self._lock:
            anchor = self._anchors.get(anchor_id)
            return sorted(anchor.in_links) if anchor is not None else []

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def forge_link(
        self,
        link_id: str,
        source: str,
        target: str,
        kind: int = 0,
        config_hash: str = "",
        *,
        epoch: int | None = None,
        forged_at: datetime | None = None,
    ) -> Link:
        """Create a directed link and attach it to both endpoints.

        Raises:
            InvalidArgumentError: Empty id or endpoint, or negative *kind*.
            NotFoundError: An endpoint anchor does not exist.
            DuplicateIdError: *link_id* is already forged.
        """
        if not link_id:
            raise InvalidArgumentError("Link id must not be empty")
        if not source or not target:
            msg = "Link endpoints must not be empty"
            raise InvalidArgumentError(msg, source=source, target=target)
        if kind < 0:
            msg = f"Link kind must be non-negative, got {kind}"
            raise InvalidArgumentError(msg, kind=kind)

        with self._lock:
            for endpoint, role in ((source, "source"), (target, "target")):
                if endpoint not in self._anchors:
                    msg = f"Anchor not found: {endpoint} ({role})"
                    raise NotFoundError(msg, id=endpoint, role=role)
            if link_id in self._links:
                msg = f"Link already forged: {link_id}"
                raise DuplicateIdError(msg, id=link_id)

            link = Link(
                id=link_id,
                source=source,
                target=target,
                kind=kind,
                forged_at=forged_at if forged_at is not None else self._clock(),
                config_hash=config_hash or "",
                epoch=self._epoch if epoch is None else epoch,
            )
            self._links[link_id] = link
            self._anchors[source].out_links.add(link_id)
            self._anchors[target].in_links.add(link_id)
            self._revision += 1
            logger.debug("Forged link %s: %s -> %s (kind %d)", link_id, source, target, kind)
            return link

    def sever_link(self, link_id: str) -> Link:
        """Remove a link and detach it from both endpoints.

        Raises:
            NotFoundError: No such link.
        """
        with self._lock:
            link = self._links.pop(link_id, None)
            if link is None:
                msg = f"Link not found: {link_id}"
                raise NotFoundError(msg, id=link_id)
            source = self._anchors.get(link.source)
            if source is not None:
                source.out_links.discard(link_id)
            target = self._anchors.get(link.target)
            if target is not None:
                target.in_links.discard(link_id)
            self._revision += 1
            logger.debug("Severed link %s", link_id)
            return link

    def get_link(self, link_id: str) -> Link | None:
        with self._lock:
            return self._links.get(link_id)

    def links(self) -> list[Link]:
        """Snapshot of all links in forge order."""
        with self._lock:
            return list(self._links.values())

    def link_ids(self) -> list[str]:
        with self._lock:
            return list(self._links)

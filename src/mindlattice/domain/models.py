"""Anchor and Link — the lattice entity model.

Identity and attributes are fixed at creation. The adjacency sets and the
recall fields of an :class:`Anchor` are mutated only by
:class:`~mindlattice.lattice.store.LatticeStore`; anything handed out of
the store is a copy made with :meth:`Anchor.copy`.

Anchors and links reference each other by id only. The store owns both.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

MAX_LABEL_LEN = 256
MIN_TIER = 0
MAX_TIER = 7


def truncate_label(label: str) -> str:
    """Cut *label* down to :data:`MAX_LABEL_LEN` characters."""
    return label[:MAX_LABEL_LEN]


def clamp_tier(tier: int) -> int:
    """Clamp a recall tier into ``[MIN_TIER, MAX_TIER]``."""
    return max(MIN_TIER, min(MAX_TIER, tier))


@dataclass
class Anchor:
    """A labeled node in the lattice."""

    id: str
    label: str
    content_hash: str
    tier: int
    pinned_at: datetime
    epoch: int = 0
    out_links: set[str] = field(default_factory=set)
    in_links: set[str] = field(default_factory=set)
    recall_stored: bool = False
    recall_hash: str | None = None

    @property
    def is_orphan(self) -> bool:
        return not self.out_links and not self.in_links

    def copy(self) -> Anchor:
        """Detached snapshot; mutating it never reaches the store."""
        return replace(self, out_links=set(self.out_links), in_links=set(self.in_links))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "content_hash": self.content_hash,
            "tier": self.tier,
            "pinned_at": self.pinned_at.isoformat(),
            "epoch": self.epoch,
            "out_links": sorted(self.out_links),
            "in_links": sorted(self.in_links),
            "recall_stored": self.recall_stored,
            "recall_hash": self.recall_hash,
        }


@dataclass(frozen=True)
class Link:
    """A directed, typed edge between two anchors."""

    id: str
    source: str
    target: str
    kind: int
    forged_at: datetime
    config_hash: str = ""
    epoch: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "kind": self.kind,
            "forged_at": self.forged_at.isoformat(),
            "config_hash": self.config_hash,
            "epoch": self.epoch,
        }

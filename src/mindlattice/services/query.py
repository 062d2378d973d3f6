"""QueryService — lookups, search, filters and lattice summary.

Read-only. Missing anchors or links are NOT_FOUND only on identity
lookups (``get_anchor``, ``get_link``, ``by_content_hash``); filters and
searches return empty lists instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from mindlattice.lattice import traversal, validator
from mindlattice.services._helpers import parse_timestamp
from mindlattice.services.base import BaseService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import traced

if TYPE_CHECKING:
    from mindlattice.domain.models import Anchor, Link

LinkDirection = Literal["out", "in"]


def _anchor_items(anchors: list[Anchor]) -> list[dict[str, Any]]:
    return [a.to_dict() for a in anchors]


def _link_items(links: list[Link]) -> list[dict[str, Any]]:
    return [link.to_dict() for link in links]


class QueryService(BaseService):
    """Search and inspect anchors and links."""

    @traced
    def get_anchor(self, anchor_id: str) -> ServiceResult:
        anchor = self._store.get_anchor(anchor_id)
        if anchor is None:
            return self._not_found("get_anchor", f"Anchor not found: {anchor_id}", id=anchor_id)
        return ServiceResult(ok=True, op="get_anchor", data=anchor.to_dict())

    @traced
    def get_link(self, link_id: str) -> ServiceResult:
        link = self._store.get_link(link_id)
        if link is None:
            return self._not_found("get_link", f"Link not found: {link_id}", id=link_id)
        return ServiceResult(ok=True, op="get_link", data=link.to_dict())

    @traced
    def find(
        self,
        *,
        text: str | None = None,
        tier: int | None = None,
        recalled: bool | None = None,
    ) -> ServiceResult:
        """Search anchors by label text, narrowed by tier and recall flag.

        Filters combine with AND; no filters lists every anchor.
        """
        anchors = traversal.find_by_label_contains(self._store, text)
        if tier is not None:
            wanted = {a.id for a in traversal.find_by_recall_tier(self._store, tier)}
            anchors = [a for a in anchors if a.id in wanted]
        if recalled is not None:
            wanted = {a.id for a in traversal.find_by_recall_stored(self._store, recalled)}
            anchors = [a for a in anchors if a.id in wanted]

        return ServiceResult(
            ok=True,
            op="find",
            data={"count": len(anchors), "items": _anchor_items(anchors)},
        )

    @traced
    def links(self, anchor_id: str, *, direction: LinkDirection = "out") -> ServiceResult:
        """Links leaving (``out``) or entering (``in``) *anchor_id*."""
        if direction == "out":
            found = traversal.find_links_from(self._store, anchor_id)
        else:
            found = traversal.find_links_to(self._store, anchor_id)
        return ServiceResult(
            ok=True,
            op="links",
            data={
                "anchor_id": anchor_id,
                "direction": direction,
                "count": len(found),
                "items": _link_items(found),
            },
        )

    @traced
    def by_content_hash(self, content_hash: str) -> ServiceResult:
        anchor = traversal.anchor_by_content_hash(self._store, content_hash)
        if anchor is None:
            return self._not_found(
                "by_content_hash",
                f"No anchor with content hash: {content_hash}",
                content_hash=content_hash,
            )
        return ServiceResult(ok=True, op="by_content_hash", data=anchor.to_dict())

    @traced
    def sorted_by_pinned(self, *, ascending: bool = True) -> ServiceResult:
        anchors = traversal.sort_by_pinned_time(self._store, ascending=ascending)
        return ServiceResult(
            ok=True,
            op="sorted_by_pinned",
            data={"ascending": ascending, "count": len(anchors), "items": _anchor_items(anchors)},
        )

    @traced
    def epoch_filter(
        self,
        *,
        epoch: int | None = None,
        since_epoch: int | None = None,
        pinned_after: str | None = None,
        pinned_before: str | None = None,
    ) -> ServiceResult:
        """Anchors by the epoch they were pinned in, or by pin-time window.

        *pinned_after* / *pinned_before* are inclusive ISO 8601 bounds.
        """
        op = "epoch_filter"
        try:
            start = parse_timestamp(pinned_after) if pinned_after else None
            end = parse_timestamp(pinned_before) if pinned_before else None
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_ARGUMENT", f"Bad timestamp: {exc}")

        anchors = traversal.find_pinned_between(self._store, start, end)
        if epoch is not None:
            wanted = {a.id for a in traversal.find_pinned_in_epoch(self._store, epoch)}
            anchors = [a for a in anchors if a.id in wanted]
        if since_epoch is not None:
            wanted = {a.id for a in traversal.find_pinned_since_epoch(self._store, since_epoch)}
            anchors = [a for a in anchors if a.id in wanted]

        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(anchors), "items": _anchor_items(anchors)},
        )

    @traced
    def stats(self) -> ServiceResult:
        """Counts and health numbers for the whole lattice."""
        store = self._store
        with store.locked():
            recalled = len(traversal.find_by_recall_stored(store, True))
            data = {
                "anchors": store.anchor_count,
                "links": validator.total_edges(store),
                "capacity": store.capacity,
                "epoch": store.epoch,
                "recalled": recalled,
                "orphans": len(validator.orphan_anchors(store)),
            }
        return ServiceResult(ok=True, op="stats", data=data)

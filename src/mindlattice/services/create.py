"""CreateService — every write path into the lattice.

Ids and hashes are produced here (via :mod:`mindlattice.domain.ids`) when
the caller does not supply them; the store only validates and stores.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from mindlattice.domain import ids
from mindlattice.domain.errors import LatticeError
from mindlattice.lattice.serializer import load_payload
from mindlattice.services.base import BaseService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import trace_span, traced


class CreateService(BaseService):
    """Pins anchors, forges and severs links, stores recall, moves epochs."""

    @traced
    def pin_anchor(
        self,
        label: str,
        *,
        anchor_id: str | None = None,
        content: str | None = None,
        content_hash: str | None = None,
        tier: int = 0,
    ) -> ServiceResult:
        """Pin a new anchor.

        Args:
            label: Display label (truncated to 256 characters by the store).
            anchor_id: Explicit id; generated from *label* when omitted.
            content: Raw content to hash into ``content_hash``.
            content_hash: Precomputed hash; wins over *content*.
            tier: Recall tier, clamped into 0-7.
        """
        op = "pin_anchor"
        warnings: list[str] = []
        resolved_id = anchor_id if anchor_id is not None else ids.generate_anchor_id(label)
        digest = content_hash
        if digest is None:
            digest = ids.content_hash(content) if content is not None else ""
        if not 0 <= tier <= 7:
            warnings.append(f"Tier {tier} clamped into 0-7")

        try:
            with self._lattice.mutation() as store:
                anchor = store.pin_anchor(resolved_id, label, digest, tier)
        except LatticeError as exc:
            return self._failure(op, exc)

        if len(label) > len(anchor.label):
            warnings.append(f"Label truncated to {len(anchor.label)} characters")
        return ServiceResult(ok=True, op=op, data=anchor.to_dict(), warnings=warnings)

    @traced
    def forge_link(
        self,
        source: str,
        target: str,
        *,
        link_id: str | None = None,
        kind: int = 0,
        config_hash: str = "",
    ) -> ServiceResult:
        """Forge a directed link *source* -> *target*."""
        op = "forge_link"
        resolved_id = link_id
        if resolved_id is None:
            resolved_id = ids.generate_link_id(source, target, kind)
        try:
            with self._lattice.mutation() as store:
                link = store.forge_link(resolved_id, source, target, kind, config_hash)
        except LatticeError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=link.to_dict())

    @traced
    def sever_link(self, link_id: str) -> ServiceResult:
        op = "sever_link"
        try:
            with self._lattice.mutation() as store:
                link = store.sever_link(link_id)
        except LatticeError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=link.to_dict())

    @traced
    def store_recall(
        self,
        anchor_id: str,
        *,
        content: str | None = None,
        recall_hash: str | None = None,
    ) -> ServiceResult:
        """Mark recall as stored for *anchor_id* (once per anchor)."""
        op = "store_recall"
        digest = recall_hash
        if digest is None:
            digest = ids.content_hash(content) if content is not None else ""
        try:
            with self._lattice.mutation() as store:
                anchor = store.store_recall(anchor_id, digest)
        except LatticeError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=anchor.to_dict())

    @traced
    def advance_epoch(self) -> ServiceResult:
        with self._lattice.mutation() as store:
            epoch = store.advance_epoch()
        return ServiceResult(ok=True, op="advance_epoch", data={"epoch": epoch})

    @traced
    def load_snapshot(self, payload: Any, *, partial: bool = False) -> ServiceResult:
        """Import a decoded snapshot document.

        All-or-nothing unless *partial* is True: a strict import that fails
        leaves the lattice as it was. With *partial*, failing entries are
        reported and the rest are loaded.
        """
        op = "load_snapshot"
        try:
            with trace_span("load_payload") as span, self._lattice.mutation() as store:
                report = load_payload(store, payload, partial=partial)
                if span:
                    span.annotate("anchors", report.anchors)
                    span.annotate("links", report.links)
        except LatticeError as exc:
            return self._failure(op, exc)

        data = asdict(report)
        if report.errors:
            return ServiceResult.failure(
                op, "LOAD_PARTIAL", f"{len(report.errors)} snapshot entries failed", data=data
            )
        return ServiceResult(ok=True, op=op, data=data)

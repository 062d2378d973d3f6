"""JSON export of the lattice, and the matching importer.

Document shape::

    {
      "version": "1.0.0-synapse",
      "epoch": 3,
      "nodes": [{"id": ..., "label": ..., "contentHash": ..., "tier": 0,
                 "recallStored": false, "recallHash": null,
                 "epoch": 0, "pinnedAt": "2025-01-01T00:00:00Z"}],
      "links": [{"id": ..., "from": ..., "to": ..., "kind": 0,
                 "configHash": "", "epoch": 0, "forgedAt": "..."}]
    }

Nodes follow pin order and links follow forge order. The per-entry
``epoch``, ``pinnedAt``/``forgedAt``, ``recallHash`` and ``configHash``
keys are optional on import; when absent the store stamps the entry with
its current epoch and clock, so hand-written documents with only the core
keys still load.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mindlattice import LATTICE_VERSION
from mindlattice.domain.errors import (
    CapacityExceededError,
    DuplicateIdError,
    InvalidArgumentError,
    LatticeError,
    NotFoundError,
)

if TYPE_CHECKING:
    from mindlattice.lattice.store import LatticeStore


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps in hand-written documents are read as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SnapshotNode(BaseModel):
    """One entry of the ``nodes`` array."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    label: str = ""
    content_hash: str = Field(default="", alias="contentHash")
    tier: int = 0
    recall_stored: bool = Field(default=False, alias="recallStored")
    recall_hash: str | None = Field(default=None, alias="recallHash")
    epoch: int | None = Field(default=None, ge=0)
    pinned_at: datetime | None = Field(default=None, alias="pinnedAt")

    @field_validator("pinned_at")
    @classmethod
    def _pinned_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class SnapshotLink(BaseModel):
    """One entry of the ``links`` array."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    kind: int = 0
    config_hash: str = Field(default="", alias="configHash")
    epoch: int | None = Field(default=None, ge=0)
    forged_at: datetime | None = Field(default=None, alias="forgedAt")

    @field_validator("forged_at")
    @classmethod
    def _forged_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class Snapshot(BaseModel):
    """The whole exported document."""

    model_config = ConfigDict(frozen=True)

    version: str = LATTICE_VERSION
    epoch: int = 0
    nodes: list[SnapshotNode] = Field(default_factory=list)
    links: list[SnapshotLink] = Field(default_factory=list)


@dataclass
class LoadReport:
    """Outcome of :func:`load_payload`."""

    anchors: int = 0
    links: int = 0
    epoch: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


def build_snapshot(store: LatticeStore) -> Snapshot:
    with store.locked():
        return Snapshot(
            epoch=store.epoch,
            nodes=[
                SnapshotNode(
                    id=a.id,
                    label=a.label,
                    content_hash=a.content_hash,
                    tier=a.tier,
                    recall_stored=a.recall_stored,
                    recall_hash=a.recall_hash,
                    epoch=a.epoch,
                    pinned_at=a.pinned_at,
                )
                for a in store.anchors()
            ],
            links=[
                SnapshotLink(
                    id=link.id,
                    source=link.source,
                    target=link.target,
                    kind=link.kind,
                    config_hash=link.config_hash,
                    epoch=link.epoch,
                    forged_at=link.forged_at,
                )
                for link in store.links()
            ],
        )


def to_payload(store: LatticeStore) -> dict[str, Any]:
    """Export the store as a JSON-ready dict using the wire key names."""
    return build_snapshot(store).model_dump(mode="json", by_alias=True)


def to_json(store: LatticeStore, *, indent: int | None = 2) -> str:
    """Export the store as JSON text.

    ``json.dumps`` escapes backslash, double quote, newline and carriage
    return inside string fields.
    """
    return json.dumps(to_payload(store), indent=indent, ensure_ascii=False)


def parse_payload(payload: Any) -> Snapshot:
    """Validate a decoded document.

    Raises:
        InvalidArgumentError: The payload does not have the snapshot shape.
    """
    try:
        return Snapshot.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid lattice snapshot: {exc.error_count()} validation error(s)"
        raise InvalidArgumentError(
            msg, errors=exc.errors(include_url=False, include_context=False)
        ) from exc


def load_payload(
    store: LatticeStore,
    payload: Any,
    *,
    partial: bool = False,
) -> LoadReport:
    """Pin every node, forge every link, then restore the epoch.

    All nodes are pinned before any link is forged, so link order in the
    document does not matter. Without *partial* the whole document is
    checked against the store first and the first conflict is raised
    before anything is written; with it, failing entries are collected in
    ``LoadReport.errors`` and the rest are loaded.
    """
    snapshot = parse_payload(payload)
    report = LoadReport()

    with store.locked():
        if not partial:
            _check_document(store, snapshot)

        for index, node in enumerate(snapshot.nodes):
            try:
                store.pin_anchor(
                    node.id,
                    node.label,
                    node.content_hash,
                    node.tier,
                    epoch=node.epoch,
                    pinned_at=node.pinned_at,
                )
                if node.recall_stored:
                    store.store_recall(node.id, node.recall_hash or "")
            except LatticeError as exc:
                if not partial:
                    raise
                report.errors.append(_error_entry("node", index, node.id, exc))
                continue
            report.anchors += 1

        for index, link in enumerate(snapshot.links):
            try:
                store.forge_link(
                    link.id,
                    link.source,
                    link.target,
                    link.kind,
                    link.config_hash,
                    epoch=link.epoch,
                    forged_at=link.forged_at,
                )
            except LatticeError as exc:
                if not partial:
                    raise
                report.errors.append(_error_entry("link", index, link.id, exc))
                continue
            report.links += 1

        if snapshot.epoch > store.epoch:
            store.restore_epoch(snapshot.epoch)
        report.epoch = store.epoch
    return report


def _check_document(store: LatticeStore, snapshot: Snapshot) -> None:
    """Raise the error the store would raise for the first bad entry.

    Checks run in the store's own order (capacity, empty id, duplicate for
    nodes; arguments, endpoints, duplicate for links) against the store's
    ids plus the ids the document itself introduces. Caller holds the lock.
    """
    anchor_ids = set(store.anchor_ids())
    room = store.capacity - len(anchor_ids)
    for index, node in enumerate(snapshot.nodes):
        if index >= room:
            msg = f"Lattice is full ({store.capacity} anchors)"
            raise CapacityExceededError(msg, capacity=store.capacity)
        if not node.id:
            raise InvalidArgumentError("Anchor id must not be empty")
        if node.id in anchor_ids:
            msg = f"Anchor already pinned: {node.id}"
            raise DuplicateIdError(msg, id=node.id)
        anchor_ids.add(node.id)

    link_ids = set(store.link_ids())
    for link in snapshot.links:
        if not link.id:
            raise InvalidArgumentError("Link id must not be empty")
        if not link.source or not link.target:
            msg = "Link endpoints must not be empty"
            raise InvalidArgumentError(msg, source=link.source, target=link.target)
        if link.kind < 0:
            msg = f"Link kind must be non-negative, got {link.kind}"
            raise InvalidArgumentError(msg, kind=link.kind)
        for endpoint, role in ((link.source, "source"), (link.target, "target")):
            if endpoint not in anchor_ids:
                msg = f"Anchor not found: {endpoint} ({role})"
                raise NotFoundError(msg, id=endpoint, role=role)
        if link.id in link_ids:
            msg = f"Link already forged: {link.id}"
            raise DuplicateIdError(msg, id=link.id)
        link_ids.add(link.id)


def _error_entry(section: str, index: int, entry_id: str, exc: LatticeError) -> dict[str, Any]:
    return {"section": section, "index": index, "id": entry_id, "code": exc.code, "error": str(exc)}

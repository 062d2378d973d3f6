"""Tests for the JSON snapshot exporter and importer."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from mindlattice import LATTICE_VERSION
from mindlattice.domain.errors import (
    CapacityExceededError,
    DuplicateIdError,
    InvalidArgumentError,
    NotFoundError,
)
from mindlattice.lattice import serializer, traversal
from mindlattice.lattice.store import LatticeStore
from tests.conftest import T0, build_chain


class TestExport:
    def test_document_shape(self, store: LatticeStore) -> None:
        store.pin_anchor("a", "Alpha", "h1", 2)
        store.pin_anchor("b", "Beta")
        store.store_recall("b", "r")
        store.forge_link("l1", "a", "b", kind=3, config_hash="cfg")
        store.advance_epoch()

        doc = json.loads(serializer.to_json(store))
        stamps = [n.pop("pinnedAt") for n in doc["nodes"]] + [doc["links"][0].pop("forgedAt")]
        assert [datetime.fromisoformat(s) for s in stamps] == [
            T0,
            T0 + timedelta(seconds=1),
            T0 + timedelta(seconds=2),
        ]
        assert doc == {
            "version": LATTICE_VERSION,
            "epoch": 1,
            "nodes": [
                {
                    "id": "a",
                    "label": "Alpha",
                    "contentHash": "h1",
                    "tier": 2,
                    "recallStored": False,
                    "recallHash": None,
                    "epoch": 0,
                },
                {
                    "id": "b",
                    "label": "Beta",
                    "contentHash": "",
                    "tier": 0,
                    "recallStored": True,
                    "recallHash": "r",
                    "epoch": 0,
                },
            ],
            "links": [
                {"id": "l1", "from": "a", "to": "b", "kind": 3, "configHash": "cfg", "epoch": 0}
            ],
        }

    def test_empty_store(self, store: LatticeStore) -> None:
        doc = serializer.to_payload(store)
        assert doc["nodes"] == []
        assert doc["links"] == []
        assert doc["version"] == "1.0.0-synapse"

    def test_special_characters_escaped(self, store: LatticeStore) -> None:
        label = 'say "hi"\\ now\nnext\rline'
        store.pin_anchor("a", label)
        text = serializer.to_json(store, indent=None)
        assert '\\"hi\\"' in text
        assert "\\\\" in text
        assert "\\n" in text
        assert "\\r" in text
        assert "\n" not in text
        assert json.loads(text)["nodes"][0]["label"] == label

    def test_compact_when_indent_none(self, store: LatticeStore) -> None:
        store.pin_anchor("a", "A")
        assert "\n" not in serializer.to_json(store, indent=None)


class TestLoad:
    def test_reload_gives_equivalent_store(self, store: LatticeStore) -> None:
        build_chain(store, ["a", "b", "c"], tier=4)
        store.store_recall("b", "x")
        store.advance_epoch()
        store.advance_epoch()

        fresh = LatticeStore()
        report = serializer.load_payload(fresh, serializer.to_payload(store))

        assert (report.anchors, report.links, report.epoch, report.errors) == (3, 2, 2, [])
        assert serializer.to_payload(fresh) == serializer.to_payload(store)
        assert fresh.out_link_ids("a") == ["a-b"]
        assert fresh.in_link_ids("c") == ["b-c"]

    def test_links_may_precede_their_nodes(self, store: LatticeStore) -> None:
        payload = {
            "links": [{"id": "l", "from": "a", "to": "b"}],
            "nodes": [{"id": "b"}, {"id": "a"}],
        }
        report = serializer.load_payload(store, payload)
        assert report.links == 1
        assert store.anchor_ids() == ["b", "a"]

    def test_invalid_shape(self, store: LatticeStore) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            serializer.load_payload(store, {"nodes": [{"label": "no id"}]})
        assert exc_info.value.detail["errors"]
        assert store.anchor_count == 0

    def test_strict_stops_on_first_failure(self, store: LatticeStore) -> None:
        payload = {"nodes": [{"id": "a"}, {"id": "a"}], "links": []}
        with pytest.raises(DuplicateIdError):
            serializer.load_payload(store, payload)
        assert store.anchor_count == 0

    def test_strict_missing_endpoint(self, store: LatticeStore) -> None:
        payload = {"nodes": [{"id": "a"}], "links": [{"id": "l", "from": "a", "to": "ghost"}]}
        with pytest.raises(NotFoundError):
            serializer.load_payload(store, payload)
        assert (store.anchor_count, store.link_count) == (0, 0)

    def test_strict_failure_leaves_existing_store_untouched(self, store: LatticeStore) -> None:
        build_chain(store, ["a", "b"])
        revision = store.revision
        payload = {
            "epoch": 9,
            "nodes": [{"id": "c"}, {"id": "d"}],
            "links": [{"id": "c-d", "from": "c", "to": "d"}, {"id": "a-b", "from": "a", "to": "b"}],
        }
        with pytest.raises(DuplicateIdError):
            serializer.load_payload(store, payload)
        assert store.anchor_ids() == ["a", "b"]
        assert store.link_ids() == ["a-b"]
        assert store.epoch == 0
        assert store.revision == revision

    def test_strict_capacity_checked_up_front(self) -> None:
        small = LatticeStore(capacity=2)
        small.pin_anchor("a", "A")
        with pytest.raises(CapacityExceededError):
            serializer.load_payload(small, {"nodes": [{"id": "b"}, {"id": "c"}]})
        assert small.anchor_ids() == ["a"]

    def test_partial_collects_errors(self, store: LatticeStore) -> None:
        payload = {
            "epoch": 3,
            "nodes": [{"id": "a"}, {"id": "a"}, {"id": "b"}],
            "links": [
                {"id": "ok", "from": "a", "to": "b"},
                {"id": "bad", "from": "a", "to": "ghost"},
            ],
        }
        report = serializer.load_payload(store, payload, partial=True)
        assert report.anchors == 2
        assert report.links == 1
        assert report.epoch == 3
        assert [(e["section"], e["index"], e["code"]) for e in report.errors] == [
            ("node", 1, "DUPLICATE_ID"),
            ("link", 1, "NOT_FOUND"),
        ]

    def test_epoch_never_moves_backwards(self, store: LatticeStore) -> None:
        for _ in range(5):
            store.advance_epoch()
        report = serializer.load_payload(store, {"epoch": 2, "nodes": [], "links": []})
        assert report.epoch == 5


class TestReloadKeepsStamps:
    def test_epoch_and_times_survive(self, store: LatticeStore) -> None:
        store.pin_anchor("a", "A")
        store.advance_epoch()
        store.pin_anchor("d", "D")
        store.forge_link("a-d", "a", "d", config_hash="cfg")

        fresh = LatticeStore(clock=lambda: datetime(2030, 1, 1, tzinfo=UTC))
        serializer.load_payload(fresh, serializer.to_payload(store))

        assert [a.id for a in traversal.find_pinned_since_epoch(fresh, 1)] == ["d"]
        assert [a.id for a in traversal.find_pinned_in_epoch(fresh, 0)] == ["a"]
        for original in store.anchors():
            restored = fresh.get_anchor(original.id)
            assert restored is not None
            assert (restored.epoch, restored.pinned_at) == (original.epoch, original.pinned_at)
        link = fresh.get_link("a-d")
        assert link is not None
        assert (link.epoch, link.config_hash) == (1, "cfg")
        assert link.forged_at == T0 + timedelta(seconds=2)

    def test_recall_hash_survives(self, store: LatticeStore) -> None:
        store.pin_anchor("a", "A")
        store.store_recall("a", "digest")
        fresh = LatticeStore()
        serializer.load_payload(fresh, serializer.to_payload(store))
        anchor = fresh.get_anchor("a")
        assert anchor is not None
        assert (anchor.recall_stored, anchor.recall_hash) == (True, "digest")

    def test_missing_stamps_use_current_epoch_and_clock(self, store: LatticeStore) -> None:
        store.advance_epoch()
        serializer.load_payload(store, {"nodes": [{"id": "a"}]})
        anchor = store.get_anchor("a")
        assert anchor is not None
        assert (anchor.epoch, anchor.pinned_at) == (1, T0)

    def test_naive_timestamp_read_as_utc(self, store: LatticeStore) -> None:
        serializer.load_payload(store, {"nodes": [{"id": "a", "pinnedAt": "2025-03-01T12:00:00"}]})
        anchor = store.get_anchor("a")
        assert anchor is not None
        assert anchor.pinned_at == datetime(2025, 3, 1, 12, tzinfo=UTC)

    def test_negative_epoch_rejected(self, store: LatticeStore) -> None:
        with pytest.raises(InvalidArgumentError):
            serializer.load_payload(store, {"nodes": [{"id": "a", "epoch": -1}]})

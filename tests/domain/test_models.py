"""Tests for the Anchor and Link entities."""

from __future__ import annotations

import dataclasses

import pytest

from mindlattice.domain.models import (
    MAX_LABEL_LEN,
    Anchor,
    Link,
    clamp_tier,
    truncate_label,
)
from tests.conftest import T0


def _anchor(**kwargs) -> Anchor:
    defaults = {"id": "a", "label": "A", "content_hash": "", "tier": 0, "pinned_at": T0}
    defaults.update(kwargs)
    return Anchor(**defaults)


class TestHelpers:
    def test_truncate_label(self) -> None:
        assert truncate_label("short") == "short"
        assert len(truncate_label("y" * (MAX_LABEL_LEN + 10))) == MAX_LABEL_LEN

    @pytest.mark.parametrize(("tier", "expected"), [(-1, 0), (0, 0), (4, 4), (7, 7), (8, 7)])
    def test_clamp_tier(self, tier: int, expected: int) -> None:
        assert clamp_tier(tier) == expected


class TestAnchor:
    def test_orphan(self) -> None:
        anchor = _anchor()
        assert anchor.is_orphan
        anchor.in_links.add("l")
        assert not anchor.is_orphan

    def test_copy_detaches_link_sets(self) -> None:
        anchor = _anchor(out_links={"l1"})
        clone = anchor.copy()
        clone.out_links.add("l2")
        assert anchor.out_links == {"l1"}

    def test_to_dict(self) -> None:
        data = _anchor(out_links={"z", "m"}, recall_stored=True, recall_hash="rh").to_dict()
        assert data["pinned_at"] == "2025-01-01T00:00:00+00:00"
        assert data["out_links"] == ["m", "z"]
        assert data["in_links"] == []
        assert data["recall_stored"] is True
        assert data["recall_hash"] == "rh"


class TestLink:
    def test_frozen(self) -> None:
        link = Link(id="l", source="a", target="b", kind=0, forged_at=T0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            link.kind = 3  # type: ignore[misc]

    def test_to_dict(self) -> None:
        link = Link(id="l", source="a", target="b", kind=2, forged_at=T0, config_hash="c", epoch=1)
        assert link.to_dict() == {
            "id": "l",
            "source": "a",
            "target": "b",
            "kind": 2,
            "forged_at": "2025-01-01T00:00:00+00:00",
            "config_hash": "c",
            "epoch": 1,
        }

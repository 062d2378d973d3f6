"""Fixtures shared by the command tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import write_payload


@pytest.fixture
def chain_snapshot(snapshot_file: Path) -> Path:
    """Snapshot file holding a -> b -> c (tiers 1, 2, 3) at epoch 0."""
    return write_payload(
        snapshot_file,
        {
            "version": "1.0.0-synapse",
            "epoch": 0,
            "nodes": [
                {"id": "a", "label": "Alpha", "contentHash": "ha", "tier": 1},
                {"id": "b", "label": "Beta", "contentHash": "hb", "tier": 2},
                {"id": "c", "label": "Gamma", "contentHash": "hc", "tier": 3},
            ],
            "links": [
                {"id": "a-b", "from": "a", "to": "b", "kind": 0},
                {"id": "b-c", "from": "b", "to": "c", "kind": 1},
            ],
        },
    )

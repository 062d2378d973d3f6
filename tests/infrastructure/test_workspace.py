"""Tests for Lattice — store, settings and graph view together."""

from __future__ import annotations

import json
from pathlib import Path

from mindlattice.config.settings import LatticeSettings
from mindlattice.infrastructure.workspace import Lattice
from tests.conftest import build_chain


class TestLattice:
    def test_store_sized_from_settings(self, tmp_path: Path) -> None:
        (tmp_path / "mindlattice.toml").write_text("[lattice]\ncapacity = 7\n")
        lattice = Lattice(LatticeSettings.from_cli(workdir=tmp_path))
        assert lattice.store.capacity == 7
        assert lattice.max_depth == 64

    def test_mutation_invalidates_graph(self, lattice: Lattice) -> None:
        first = lattice.graph.graph
        with lattice.mutation() as store:
            store.pin_anchor("a", "A")
        assert "a" in lattice.graph.graph
        assert lattice.graph.graph is not first

    def test_save_and_load(
        self, lattice: Lattice, settings: LatticeSettings, tmp_path: Path
    ) -> None:
        build_chain(lattice.store, ["a", "b"])
        path = lattice.save(tmp_path / "out.json")
        assert json.loads(path.read_text())["links"][0]["id"] == "a-b"

        other = Lattice(settings)
        report = other.load(path)
        assert (report.anchors, report.links) == (2, 1)
        assert other.store.out_link_ids("a") == ["a-b"]

    def test_renderer_from_settings(self, tmp_path: Path) -> None:
        (tmp_path / "mindlattice.toml").write_text("[render]\nmax_depth = 0\n")
        lattice = Lattice(LatticeSettings.from_cli(workdir=tmp_path))
        build_chain(lattice.store, ["a", "b"])
        assert lattice.renderer().render_from("a") == "[T0] A (a)"

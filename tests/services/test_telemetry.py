"""Tests for service tracing: Span, trace_span, @traced."""

from __future__ import annotations

from mindlattice.infrastructure.workspace import Lattice
from mindlattice.services.export import ExportService
from mindlattice.services.graph import GraphService
from mindlattice.services.result import ServiceResult
from mindlattice.services.telemetry import Span, set_tracing, trace_span, traced
from tests.conftest import build_chain


class TestSpan:
    def test_duration_before_close_is_zero(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_to_dict(self) -> None:
        root = Span(name="root")
        child = Span(name="child")
        root.children.append(child)
        child.annotate("visited", 3)
        child.close()
        root.close()
        d = root.to_dict()
        assert d["name"] == "root"
        assert d["duration_ms"] >= 0.0
        assert "annotations" not in d
        assert d["children"][0]["annotations"] == {"visited": 3}


class TestTraceSpan:
    def test_off_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_outside_traced_call_yields_none(self) -> None:
        set_tracing(True)
        with trace_span("x") as span:
            assert span is None

    def test_phases_nest_under_traced_call(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("a") as a:
                assert a is not None
                with trace_span("b") as b:
                    assert b is not None
                    b.annotate("n", 1)
            return ServiceResult(ok=True, op="t")

        set_tracing(True)
        tree = op().meta["telemetry"]  # type: ignore[index]
        assert tree["children"][0]["name"] == "a"
        inner = tree["children"][0]["children"][0]
        assert (inner["name"], inner["annotations"]) == ("b", {"n": 1})


class TestTraced:
    def test_noop_when_off(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="t")

        assert op().meta is None

    def test_injects_meta_and_keeps_existing(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="t", meta={"keep": 1})

        set_tracing(True)
        result = op()
        assert result.meta is not None
        assert result.meta["keep"] == 1
        assert result.meta["telemetry"]["name"].endswith("op")

    def test_non_result_passthrough(self) -> None:
        @traced
        def op() -> str:
            return "plain"

        set_tracing(True)
        assert op() == "plain"

    def test_service_span_tree(self, lattice: Lattice) -> None:
        build_chain(lattice.store, ["a", "b"])
        set_tracing(True)
        result = GraphService(lattice).traverse("a")
        tree = result.meta["telemetry"]  # type: ignore[index]
        assert tree["name"] == "GraphService.traverse"
        assert tree["children"][0]["name"] == "bfs"
        assert tree["children"][0]["annotations"] == {"visited": 2}

    def test_nested_service_call_reported_once(self, lattice: Lattice) -> None:
        build_chain(lattice.store, ["a", "b"])
        set_tracing(True)
        result = ExportService(lattice).export("json")
        tree = result.meta["telemetry"]  # type: ignore[index]
        assert tree["name"] == "ExportService.export"
        assert [c["name"] for c in tree["children"]] == ["ExportService.export_json"]

    def test_switching_off_stops_collection(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="t")

        set_tracing(True)
        set_tracing(False)
        assert op().meta is None

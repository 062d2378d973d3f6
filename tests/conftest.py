"""Shared pytest fixtures and test helpers for mindlattice tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from mindlattice.config.settings import LatticeSettings
from mindlattice.infrastructure.workspace import Lattice
from mindlattice.lattice.store import LatticeStore
from mindlattice.services.telemetry import set_tracing

T0 = datetime(2025, 1, 1, tzinfo=UTC)


def make_clock(
    start: datetime = T0, step: timedelta = timedelta(seconds=1)
) -> Callable[[], datetime]:
    """Deterministic clock: each call returns *start* + n * *step*."""
    state = {"now": start - step}

    def clock() -> datetime:
        state["now"] += step
        return state["now"]

    return clock


@pytest.fixture(autouse=True)
def _clean_process_state() -> Generator[None]:
    """Undo logging and telemetry changes made by AppContext."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("mindlattice")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
    set_tracing(False)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No stray config or env overrides leak in from the host."""
    for var in ("MINDLATTICE_CONFIG", "MINDLATTICE_SNAPSHOT_PATH", "MINDLATTICE_LATTICE__CAPACITY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> LatticeStore:
    """Empty store with a deterministic one-second-per-call clock."""
    return LatticeStore(clock=make_clock())


@pytest.fixture
def settings(tmp_path: Path) -> LatticeSettings:
    return LatticeSettings.from_cli(workdir=tmp_path)


@pytest.fixture
def lattice(settings: LatticeSettings, store: LatticeStore) -> Lattice:
    """Lattice over the ``store`` fixture with default settings."""
    return Lattice(settings, store=store)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    return tmp_path / "lattice.json"


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def build_chain(store: LatticeStore, ids: list[str], **pin_kwargs: Any) -> None:
    """Pin *ids* and link them in order: ids[0] -> ids[1] -> ..."""
    for anchor_id in ids:
        store.pin_anchor(anchor_id, anchor_id.upper(), **pin_kwargs)
    for i in range(len(ids) - 1):
        store.forge_link(f"{ids[i]}-{ids[i + 1]}", ids[i], ids[i + 1])


def write_payload(path: Path, payload: dict[str, Any]) -> Path:
    import json

    path.write_text(json.dumps(payload), encoding="utf-8")
    return path

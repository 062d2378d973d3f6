"""Service tracing — Span, @traced, trace_span.

Off by default; ``--verbose`` switches it on through :func:`set_tracing`.
When on, each ``@traced`` service call opens a span. Calls made while a
span is open nest under it, and only the outermost call attaches the
tree to ``ServiceResult.meta["telemetry"]``. Inner phases (a BFS, one
check category) open child spans with :func:`trace_span`.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from mindlattice.services.result import ServiceResult

_tracing: ContextVar[bool] = ContextVar("mindlattice_tracing", default=False)
_active: ContextVar[Span | None] = ContextVar("mindlattice_active_span", default=None)

_log = structlog.get_logger("mindlattice.telemetry")


@dataclass
class Span:
    """One timed call or phase, with its nested spans."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started_ns: int = field(default_factory=time.perf_counter_ns)
    elapsed_ns: int | None = None

    @property
    def duration_ms(self) -> float:
        return 0.0 if self.elapsed_ns is None else self.elapsed_ns / 1_000_000

    def close(self) -> None:
        self.elapsed_ns = time.perf_counter_ns() - self.started_ns

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


def set_tracing(enabled: bool) -> None:
    """Switch span collection on or off for the current context."""
    _tracing.set(enabled)
    if not enabled:
        _active.set(None)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Child span of the open span; yields None outside a traced call."""
    parent = _active.get() if _tracing.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name)
    parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Open a span around a service method while tracing is on."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _tracing.get():
            return func(*args, **kwargs)

        parent = _active.get()
        span = Span(name=func.__qualname__)
        if parent is not None:
            parent.children.append(span)
        token = _active.set(span)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            span.close()
            _active.reset(token)
            _log.debug(
                "span.closed",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                nested=parent is not None,
            )

        if parent is None and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper

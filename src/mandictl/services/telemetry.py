"""Per-operation timing spans for ``--verbose``.

``@traced`` wraps each :class:`MandiAssistant` operation in a root span;
``trace_span`` nests timed child steps (the translation backend call) and
:func:`annotate_current` lets services attach facts such as cache hits
or the commodity match score. When telemetry is off every helper costs a
single ContextVar lookup.
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

from mandictl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


@dataclass
class Span:
    name: str
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def child(self, name: str) -> Span:
        span = Span(name=name)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.annotations:
            result["annotations"] = dict(self.annotations)
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


def annotate_current(**values: Any) -> None:
    """Attach ``values`` to the innermost open span; no-op when telemetry is off."""
    if not _enabled.get():
        return
    span = _current_span.get()
    if span is not None:
        span.annotate(**values)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a step as a child of the current span.

    Yields None when telemetry is off or no operation is being traced.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    child = parent.child(name)
    token = _current_span.set(child)
    try:
        yield child
    finally:
        child.end()
        _current_span.reset(token)


def _record_outcome(span: Span, result: ServiceResult) -> ServiceResult:
    if result.error_code:
        span.annotate(error=result.error_code)
    if result.warnings:
        span.annotate(warnings=len(result.warnings))
    meta = {**(result.meta or {}), "telemetry": span.to_dict()}
    return result.model_copy(update={"meta": meta})


def _log_span(span: Span, *, ok: bool) -> None:
    structlog.get_logger("mandictl.telemetry").debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
        **span.annotations,
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time an assistant operation and put its span tree in ``ServiceResult.meta``."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _current_span.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            span.end()
            _current_span.reset(token)
            span.annotate(raised=type(exc).__name__)
            _log_span(span, ok=False)
            raise

        span.end()
        _current_span.reset(token)

        if not isinstance(result, ServiceResult):
            _log_span(span, ok=True)
            return result
        result = _record_outcome(span, result)  # type: ignore[assignment]
        _log_span(span, ok=result.ok)
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)

"""Preview projector owning the overlay handles of in-flight commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Protocol, Tuple

from rewrap_engine.runtime import telemetry
from rewrap_engine.units import Span

DEFAULT_PREVIEW_LIMIT = 8


class PreviewSurface(Protocol):
    """Host side of the preview: draws and removes overlays, never edits text."""

    def show_preview(self, spans: Tuple[Span, ...]) -> object:
        ...

    def clear_preview(self, token: object) -> None:
        ...


@dataclass(frozen=True, slots=True)
class PreviewHandle:
    id: int
    spans: Tuple[Span, ...]
    token: object = None


class PreviewLimitError(RuntimeError):
    """Raised when more previews are open than the registry allows."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Preview registry is full ({limit} active handles)")
        self.limit = limit


class PreviewLeakError(RuntimeError):
    """Raised when a command finishes with preview handles still registered."""

    def __init__(self, handles: Iterable[PreviewHandle]) -> None:
        handles_tuple = tuple(handles)
        super().__init__(
            f"{len(handles_tuple)} preview handle(s) leaked: "
            f"{[handle.id for handle in handles_tuple]}"
        )
        self.handles = handles_tuple


class PreviewProjector:
    """Bounded registry of live previews layered over a ``PreviewSurface``."""

    def __init__(
        self,
        surface: PreviewSurface,
        *,
        limit: Optional[int] = None,
        logger_name: str | None = None,
    ) -> None:
        self.surface = surface
        self.limit = (
            limit
            if limit is not None
            else telemetry.env_int("PREVIEW_LIMIT", DEFAULT_PREVIEW_LIMIT)
        )
        self._active: Dict[int, PreviewHandle] = {}
        self._counter = 0
        self._logger_name = logger_name

    @property
    def active_count(self) -> int:
        return len(self._active)

    def active_handles(self) -> Tuple[PreviewHandle, ...]:
        return tuple(self._active.values())

    def show(self, spans: Iterable[Span]) -> PreviewHandle:
        spans_tuple = tuple(spans)
        if len(self._active) >= self.limit:
            raise PreviewLimitError(self.limit)
        token = self.surface.show_preview(spans_tuple)
        self._counter += 1
        handle = PreviewHandle(id=self._counter, spans=spans_tuple, token=token)
        self._active[handle.id] = handle
        telemetry.record_event(
            "preview.show",
            level="debug",
            data={"handle": handle.id, "spans": spans_tuple},
            logger_name=self._logger_name,
        )
        return handle

    def clear(self, handle: Optional[PreviewHandle]) -> None:
        """Remove ``handle``; unknown, cleared, or ``None`` handles are ignored."""

        if handle is None or self._active.pop(handle.id, None) is None:
            return
        self.surface.clear_preview(handle.token)
        telemetry.record_event(
            "preview.clear",
            level="debug",
            data={"handle": handle.id},
            logger_name=self._logger_name,
        )

    def clear_all(self) -> None:
        for handle in self.active_handles():
            self.clear(handle)

    @contextmanager
    def scoped(self, spans: Iterable[Span]) -> Iterator[PreviewHandle]:
        handle = self.show(spans)
        try:
            yield handle
        finally:
            self.clear(handle)

    def assert_clean(self) -> None:
        if self._active:
            raise PreviewLeakError(self._active.values())

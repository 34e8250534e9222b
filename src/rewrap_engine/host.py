"""Host services the engine calls into, plus two reference hosts.

``SnapshotHost`` edits a plain string with scripted key input and backs the
pure functions in :mod:`rewrap_engine.api`. ``BufferHost`` drives a
:class:`rewrap_engine.buffer.Buffer` so every commit lands as one undo step.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Protocol, Tuple

from rewrap_engine.buffer import Buffer, BufferMirror
from rewrap_engine.pairs import DEFAULT_MODE, ModeContext
from rewrap_engine.units import Span

KeyReader = Callable[[], Optional[str]]


class DelimiterCancelled(RuntimeError):
    """Raised by a host key reader to abandon delimiter selection."""


class EditorHost(Protocol):
    """Everything the engine needs from the editing surface."""

    def read_char(self) -> Optional[str]:
        """Block until one key arrives; ``None`` means the user cancelled."""
        ...

    def buffer_length(self) -> int:
        ...

    def buffer_slice(self, start: int, end: int) -> str:
        ...

    def buffer_replace(self, start: int, end: int, text: str) -> None:
        """Replace ``[start:end]`` atomically (one undo step)."""
        ...

    def active_mode_context(self) -> ModeContext:
        ...

    def show_preview(self, spans: Tuple[Span, ...]) -> object:
        ...

    def clear_preview(self, token: object) -> None:
        ...


class _OverlayMixin:
    """Token-keyed overlay bookkeeping shared by the reference hosts."""

    def _init_overlays(self) -> None:
        self.overlays: Dict[int, Tuple[Span, ...]] = {}
        self.preview_log: List[Tuple[str, Tuple[Span, ...]]] = []
        self._overlay_counter = 0

    def show_preview(self, spans: Tuple[Span, ...]) -> object:
        self._overlay_counter += 1
        self.overlays[self._overlay_counter] = spans
        self.preview_log.append(("show", spans))
        return self._overlay_counter

    def clear_preview(self, token: object) -> None:
        if not isinstance(token, int):
            return
        spans = self.overlays.pop(token, None)
        if spans is not None:
            self.preview_log.append(("clear", spans))

    def preview_ranges(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(
            span.as_tuple() for spans in self.overlays.values() for span in spans
        )


class SnapshotHost(_OverlayMixin):
    """String-backed host fed by a script of keys."""

    def __init__(
        self,
        text: str,
        keys: Iterable[Optional[str]] = (),
        *,
        mode: ModeContext = DEFAULT_MODE,
    ) -> None:
        self.text = text
        self.mode = mode
        self.replace_count = 0
        self._keys: Deque[Optional[str]] = deque(keys)
        self._init_overlays()

    def read_char(self) -> Optional[str]:
        if not self._keys:
            raise DelimiterCancelled("no scripted key left")
        return self._keys.popleft()

    def buffer_length(self) -> int:
        return len(self.text)

    def buffer_slice(self, start: int, end: int) -> str:
        return self.text[start:end]

    def buffer_replace(self, start: int, end: int, text: str) -> None:
        self.text = self.text[:start] + text + self.text[end:]
        self.replace_count += 1

    def active_mode_context(self) -> ModeContext:
        return self.mode


class BufferHost(_OverlayMixin):
    """Host over the reference :class:`Buffer`."""

    def __init__(
        self,
        buffer: Buffer,
        read_char: Optional[KeyReader] = None,
        *,
        mode: ModeContext = DEFAULT_MODE,
        label: str = "structural_edit",
    ) -> None:
        self.buffer = buffer
        self.mode = mode
        self.label = label
        self._read_char = read_char
        self._init_overlays()

    def read_char(self) -> Optional[str]:
        if self._read_char is None:
            raise DelimiterCancelled("host has no key reader")
        return self._read_char()

    def buffer_length(self) -> int:
        return len(self.buffer)

    def buffer_slice(self, start: int, end: int) -> str:
        return self.buffer.get_text_range(start, end)

    def buffer_replace(self, start: int, end: int, text: str) -> None:
        self.buffer.replace_range(start, end, text, label=self.label)

    def active_mode_context(self) -> ModeContext:
        return self.mode

    def mirror(self) -> BufferMirror:
        return self.buffer.mirror(
            preview=self.preview_ranges(), attributes={"mode": self.mode.name}
        )


__all__ = [
    "BufferHost",
    "DelimiterCancelled",
    "EditorHost",
    "KeyReader",
    "SnapshotHost",
]

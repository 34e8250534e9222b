"""High-level buffer façade combining document, cursor state, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, Optional, Tuple

from rewrap_engine.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Cursor
from .sync import BufferMirror
from .undo import Edit, UndoEntry, UndoTimeline
from .validation import ensure_offset, ensure_range


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: Cursor
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo = undo or UndoTimeline()

    @classmethod
    def from_text(
        cls, text: str, *, cursor: Cursor = 0, name: str = "default"
    ) -> "Buffer":
        buffer = cls(name=name, document=BufferDocument.from_text(text))
        buffer.set_cursor(cursor)
        return buffer

    @property
    def text(self) -> str:
        return self.document.text

    def __len__(self) -> int:
        return len(self.document)

    def set_cursor(self, offset: Cursor) -> None:
        self.state.set_cursor(ensure_offset(self.document, offset))

    def mirror(
        self,
        *,
        preview: Iterable[Tuple[int, int]] = (),
        attributes: Optional[dict[str, str]] = None,
    ) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
            version=self.document.version,
            preview=tuple(preview),
            attributes=dict(attributes or {}),
        )

    def get_text_range(self, start: Cursor, end: Cursor) -> str:
        start, end = ensure_range(self.document, start, end)
        return self.document.slice(start, end)

    def replace_range(
        self, start: Cursor, end: Cursor, text: str, *, label: str
    ) -> BufferDelta:
        """Replace ``[start:end]`` with ``text`` as a single undo step.

        The cursor is left untouched when it precedes the edit, moved past the
        inserted text when it fell inside the replaced range, and shifted by
        the length delta when it followed the edit.
        """

        start, end = ensure_range(self.document, start, end)
        with Transaction(self, label) as tx:
            removed = self.document.slice(start, end)
            cursor_before = self.state.cursor
            self.document = self.document.replace(start, end, text)
            if cursor_before >= end:
                cursor_after = cursor_before + len(text) - (end - start)
            elif cursor_before > start:
                cursor_after = start + len(text)
            else:
                cursor_after = cursor_before
            self.state.set_cursor(cursor_after)
            self.state.last_change_tick = self.document.version
            tx.commit(start, removed, text, cursor_before, cursor_after)

        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            cursor=self.state.cursor,
            label=label,
        )

    def insert_text(self, text: str, *, cursor: Optional[Cursor] = None) -> BufferDelta:
        position = self.state.cursor if cursor is None else cursor
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: Cursor, end: Cursor) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def undo_last(self) -> bool:
        entry = self.undo.undo()
        if entry is None:
            return False
        self._restore(entry.revert(), entry.cursor_before, label="undo")
        return True

    def redo_last(self) -> bool:
        entry = self.undo.redo()
        if entry is None:
            return False
        self._restore(entry.reapply(), entry.cursor_after, label="redo")
        return True

    def _restore(self, edit: Edit, cursor: Cursor, *, label: str) -> None:
        start, end, text = edit
        with telemetry.span(
            name=f"buffer::{label}",
            component=True,
            metadata={"buffer": self.name},
        ):
            self.document = self.document.replace(start, end, text)
            self.state.set_cursor(min(cursor, len(self.document)))
            self.state.last_change_tick = self.document.version


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        start: int,
        removed: str,
        inserted: str,
        cursor_before: Cursor,
        cursor_after: Cursor,
    ) -> None:
        entry = UndoEntry(
            label=self.label,
            start=start,
            removed=removed,
            inserted=inserted,
            cursor_before=cursor_before,
            cursor_after=cursor_after,
        )
        self.buffer.undo.push(entry)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False

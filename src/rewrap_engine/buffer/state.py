"""Cursor and change tracking state for buffers."""

from __future__ import annotations

from dataclasses import dataclass

Cursor = int  # character offset into the document


@dataclass(slots=True)
class BufferState:
    """Mutable cursor info tied to a BufferDocument version."""

    cursor: Cursor = 0
    last_change_tick: int = 0

    def set_cursor(self, offset: Cursor) -> None:
        self.cursor = offset

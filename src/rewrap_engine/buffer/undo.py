"""Undo/redo history recorded as offset edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .state import Cursor

Edit = Tuple[int, int, str]


@dataclass(frozen=True, slots=True)
class UndoEntry:
    """One ``replace_range`` call: ``removed`` at ``start`` became ``inserted``."""

    label: str
    start: int
    removed: str
    inserted: str
    cursor_before: Cursor
    cursor_after: Cursor

    def revert(self) -> Edit:
        return (self.start, self.start + len(self.inserted), self.removed)

    def reapply(self) -> Edit:
        return (self.start, self.start + len(self.removed), self.inserted)


class UndoTimeline:
    """Linear history; pushing after an undo drops the redo tail."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index = 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._index :]
        self._entries.append(entry)
        self._index = len(self._entries)

    def undo(self) -> Optional[UndoEntry]:
        if self._index == 0:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[UndoEntry]:
        if self._index == len(self._entries):
            return None
        self._index += 1
        return self._entries[self._index - 1]

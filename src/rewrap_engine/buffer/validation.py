"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import Tuple

from .document import BufferDocument
from .state import Cursor
from .sync import BufferValidationError


def ensure_offset(document: BufferDocument, offset: Cursor) -> Cursor:
    if offset < 0 or offset > len(document):
        raise BufferValidationError("Offset out of range", offset=offset)
    return offset


def ensure_range(
    document: BufferDocument, start: Cursor, end: Cursor
) -> Tuple[Cursor, Cursor]:
    start = ensure_offset(document, start)
    end = ensure_offset(document, end)
    if start > end:
        raise BufferValidationError("Range start after end", offset=start)
    return start, end

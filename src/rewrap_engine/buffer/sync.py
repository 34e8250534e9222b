"""Boundary types exchanged between buffers and host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .state import Cursor


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state.

    ``preview`` lists the ``(start, end)`` ranges currently highlighted by an
    in-flight command; hosts render them and never edit through them.
    """

    text: str
    cursor: Cursor
    version: int
    preview: Tuple[Tuple[int, int], ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when hosts or buffers provide out-of-bounds offsets."""

    def __init__(self, message: str, *, offset: Cursor | None = None) -> None:
        super().__init__(message)
        self.offset = offset

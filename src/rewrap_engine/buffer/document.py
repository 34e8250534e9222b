"""Core document data structure for rewrap_engine buffers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Immutable text snapshot tagged with a monotonically increasing version.

    Offsets address characters of ``text`` directly; there is no line model
    because every engine computation works on flat offsets.
    """

    text: str = ""
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text, version=0)

    def __len__(self) -> int:
        return len(self.text)

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]

    def replace(self, start: int, end: int, text: str) -> "BufferDocument":
        """Return a document with ``[start:end]`` replaced and the version bumped."""

        updated = self.text[:start] + text + self.text[end:]
        return BufferDocument(text=updated, version=self.version + 1)

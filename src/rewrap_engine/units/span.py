"""Half-open offset ranges over buffer text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """``[start, end)`` over buffer offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("span start cannot be negative")
        if self.start > self.end:
            raise ValueError(f"span start {self.start} after end {self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


def clamp_offset(text: str, offset: int) -> int:
    return max(0, min(offset, len(text)))

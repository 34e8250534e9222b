"""Value types describing delimiter pairs and syntax-mode overrides."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True, slots=True)
class DelimiterPair:
    """Opening and closing delimiter strings; equal for symmetric pairs."""

    open: str
    close: str

    def __post_init__(self) -> None:
        if not self.open or not self.close:
            raise ValueError("delimiter strings cannot be empty")

    @classmethod
    def self_paired(cls, char: str) -> "DelimiterPair":
        return cls(open=char, close=char)


def _normalize_overrides(
    overrides: Iterable[tuple[str, str]],
) -> tuple[tuple[str, str], ...]:
    normalized = []
    for opening, closing in overrides:
        if len(opening) != 1 or len(closing) != 1:
            raise ValueError("override delimiters must be single characters")
        normalized.append((opening, closing))
    return tuple(normalized)


@dataclass(frozen=True, slots=True)
class ModeContext:
    """Active syntax mode identity plus its ordered closing-char overrides.

    The first override naming a character wins; overrides are consulted
    before the canonical table. Characters in ``inert`` never open a region
    while scanning (the Lisp quote prefix) but still pair normally when typed
    as a target delimiter.
    """

    name: str = "fundamental"
    overrides: tuple[tuple[str, str], ...] = ()
    inert: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("mode name cannot be empty")
        object.__setattr__(self, "overrides", _normalize_overrides(self.overrides))
        object.__setattr__(self, "inert", tuple(self.inert))

    @classmethod
    def from_mapping(
        cls, name: str, overrides: Optional[Mapping[str, str]] = None
    ) -> "ModeContext":
        return cls(name=name, overrides=tuple((overrides or {}).items()))

    def override_close(self, char: str) -> Optional[str]:
        for opening, closing in self.overrides:
            if opening == char:
                return closing
        return None

    def override_open(self, char: str) -> Optional[str]:
        for opening, closing in self.overrides:
            if closing == char:
                return opening
        return None

    def opens(self, char: str) -> bool:
        return any(opening == char for opening, _ in self.overrides)

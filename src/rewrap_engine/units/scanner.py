"""Balance scanner that pairs brackets and quotes without parsing a language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rewrap_engine.pairs import ModeContext, PairTable

from .span import Span

ESCAPE = "\\"
APOSTROPHE = "'"


@dataclass(frozen=True, slots=True)
class MatchedPair:
    """A balanced region ``[start, end)`` opened by ``open`` and closed by ``close``."""

    start: int
    end: int
    open: str
    close: str

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)

    @property
    def open_span(self) -> Span:
        return Span(self.start, self.start + len(self.open))

    @property
    def close_span(self) -> Span:
        return Span(self.end - len(self.close), self.end)

    @property
    def content(self) -> Span:
        return Span(self.open_span.end, self.close_span.start)


def is_word_char(char: str) -> bool:
    return bool(char) and (char.isalnum() or char == "_")


def _is_apostrophe(text: str, index: int) -> bool:
    if text[index] != APOSTROPHE:
        return False
    before = text[index - 1] if index > 0 else ""
    after = text[index + 1] if index + 1 < len(text) else ""
    return is_word_char(before) and is_word_char(after)


def scan_pairs(
    text: str, table: PairTable, mode: Optional[ModeContext] = None
) -> Tuple[MatchedPair, ...]:
    """Return every balanced region in ``text`` ordered by start offset.

    Quote openers switch into string state where only the matching, unescaped
    closer counts. Bracket closers pop the nearest matching opener and discard
    anything unclosed above it; closers with no opener are ignored. A single quote
    between two word characters is an apostrophe, not a delimiter; other
    quotes (`f"..."`, `b"..."`) toggle string state wherever they sit.
    """

    brackets = table.bracket_pairs(mode)
    openers_by_close = {closing: opening for opening, closing in brackets.items()}
    quotes = table.quote_pairs(mode)

    found: List[MatchedPair] = []
    stack: List[Tuple[int, str]] = []
    string: Optional[Tuple[int, str, str]] = None
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == ESCAPE:
            index += 2
            continue
        if string is not None:
            start, opening, closing = string
            if char == closing and not (
                opening == closing and _is_apostrophe(text, index)
            ):
                found.append(MatchedPair(start, index + 1, opening, closing))
                string = None
        elif char in quotes:
            if not _is_apostrophe(text, index):
                string = (index, char, quotes[char])
        elif char in brackets:
            stack.append((index, char))
        elif char in openers_by_close:
            wanted = openers_by_close[char]
            for depth in range(len(stack) - 1, -1, -1):
                start, opening = stack[depth]
                if opening == wanted:
                    del stack[depth:]
                    found.append(MatchedPair(start, index + 1, opening, char))
                    break
        index += 1

    found.sort(key=lambda pair: pair.start)
    return tuple(found)

"""Resolve the enclosing pair or the adjacent unit around a cursor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional

from rewrap_engine.pairs import ModeContext, PairTable
from rewrap_engine.pairs.defaults import shared_table

from .scanner import MatchedPair, is_word_char, scan_pairs
from .span import Span, clamp_offset


@dataclass(frozen=True, slots=True)
class UnitMatch:
    """Resolved unit plus the rule that selected it (useful for previews/logs)."""

    span: Span
    rule: str
    pair: Optional[MatchedPair] = None


def find_enclosing_pair(
    text: str,
    cursor: int,
    table: Optional[PairTable] = None,
    mode: Optional[ModeContext] = None,
) -> Optional[MatchedPair]:
    """Innermost balanced pair with its opener before ``cursor`` and its
    closer at or after it; ``None`` at top level."""

    cursor = clamp_offset(text, cursor)
    innermost: Optional[MatchedPair] = None
    for pair in scan_pairs(text, table or shared_table(), mode):
        if pair.start < cursor < pair.end:
            if innermost is None or pair.start > innermost.start:
                innermost = pair
    return innermost


def resolve_enclosing(
    text: str,
    cursor: int,
    table: Optional[PairTable] = None,
    mode: Optional[ModeContext] = None,
) -> Optional[Span]:
    pair = find_enclosing_pair(text, cursor, table, mode)
    return pair.span if pair is not None else None


class _UnitScanner:
    def __init__(self, text: str, table: PairTable, mode: Optional[ModeContext]):
        self.text = text
        pairs = scan_pairs(text, table, mode)
        self.by_start: Dict[int, MatchedPair] = {pair.start: pair for pair in pairs}
        self.by_end: Dict[int, MatchedPair] = {pair.end: pair for pair in pairs}
        self.delimiters: FrozenSet[str] = _delimiter_chars(table, mode)

    def char_before(self, offset: int) -> str:
        return self.text[offset - 1] if offset > 0 else ""

    def char_at(self, offset: int) -> str:
        return self.text[offset] if offset < len(self.text) else ""

    def is_punct(self, char: str) -> bool:
        return (
            bool(char)
            and not char.isspace()
            and not is_word_char(char)
            and char not in self.delimiters
        )

    def run_forward(self, offset: int, accept: Callable[[str], bool]) -> int:
        end = offset
        while end < len(self.text) and accept(self.text[end]):
            end += 1
        return end

    def run_backward(self, offset: int, accept: Callable[[str], bool]) -> int:
        start = offset
        while start > 0 and accept(self.text[start - 1]):
            start -= 1
        return start

    def starting_at(self, offset: int, *, punct: bool) -> Optional[UnitMatch]:
        pair = self.by_start.get(offset)
        if pair is not None:
            return UnitMatch(pair.span, "balanced_forward", pair)
        char = self.char_at(offset)
        if is_word_char(char):
            return UnitMatch(
                Span(offset, self.run_forward(offset, is_word_char)), "word_forward"
            )
        if punct and self.is_punct(char):
            return UnitMatch(
                Span(offset, self.run_forward(offset, self.is_punct)), "punct_forward"
            )
        return None

    def ending_at(self, offset: int, *, punct: bool) -> Optional[UnitMatch]:
        pair = self.by_end.get(offset)
        if pair is not None:
            return UnitMatch(pair.span, "balanced_backward", pair)
        char = self.char_before(offset)
        if is_word_char(char):
            return UnitMatch(
                Span(self.run_backward(offset, is_word_char), offset), "word_backward"
            )
        if punct and self.is_punct(char):
            return UnitMatch(
                Span(self.run_backward(offset, self.is_punct), offset),
                "punct_backward",
            )
        return None


def find_adjacent_unit(
    text: str,
    cursor: int,
    table: Optional[PairTable] = None,
    mode: Optional[ModeContext] = None,
) -> UnitMatch:
    """Pick the unit an ``add`` command should wrap.

    Precedence: a balanced expression starting at the cursor, the word the
    cursor sits inside, a word starting at the cursor, a word or balanced
    expression ending at the cursor, a punctuation run on either side, then
    the nearest unit across whitespace (backward first). Falls back to an
    empty span at the cursor.
    """

    cursor = clamp_offset(text, cursor)
    if not text:
        return UnitMatch(Span(0, 0), "empty")

    scanner = _UnitScanner(text, table or shared_table(), mode)
    pair = scanner.by_start.get(cursor)
    if pair is not None:
        return UnitMatch(pair.span, "balanced_forward", pair)
    if is_word_char(scanner.char_before(cursor)) and is_word_char(
        scanner.char_at(cursor)
    ):
        span = Span(
            scanner.run_backward(cursor, is_word_char),
            scanner.run_forward(cursor, is_word_char),
        )
        return UnitMatch(span, "word_inside")

    for candidate in (
        scanner.starting_at(cursor, punct=False),
        scanner.ending_at(cursor, punct=False),
        scanner.starting_at(cursor, punct=True),
        scanner.ending_at(cursor, punct=True),
    ):
        if candidate is not None:
            return candidate

    left = scanner.run_backward(cursor, str.isspace)
    if left < cursor:
        candidate = scanner.ending_at(left, punct=True)
        if candidate is not None:
            return candidate
    right = scanner.run_forward(cursor, str.isspace)
    if right > cursor:
        candidate = scanner.starting_at(right, punct=True)
        if candidate is not None:
            return candidate
    return UnitMatch(Span(cursor, cursor), "none")


def resolve_adjacent_unit(
    text: str,
    cursor: int,
    table: Optional[PairTable] = None,
    mode: Optional[ModeContext] = None,
) -> Span:
    return find_adjacent_unit(text, cursor, table, mode).span


def _delimiter_chars(table: PairTable, mode: Optional[ModeContext]) -> FrozenSet[str]:
    chars = set()
    for mapping in (table.bracket_pairs(mode), table.quote_pairs(mode)):
        for opening, closing in mapping.items():
            chars.update((opening, closing))
    return frozenset(chars)

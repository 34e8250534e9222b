"""Unit resolution: enclosing pairs and adjacent syntactic units."""

from .span import Span, clamp_offset
from .scanner import MatchedPair, is_word_char, scan_pairs
from .resolver import (
    UnitMatch,
    find_adjacent_unit,
    find_enclosing_pair,
    resolve_adjacent_unit,
    resolve_enclosing,
)

__all__ = [
    "MatchedPair",
    "Span",
    "UnitMatch",
    "clamp_offset",
    "find_adjacent_unit",
    "find_enclosing_pair",
    "is_word_char",
    "resolve_adjacent_unit",
    "resolve_enclosing",
    "scan_pairs",
]

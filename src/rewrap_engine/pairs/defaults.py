"""Built-in pairs and mode contexts that seed every table."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import DelimiterPair, ModeContext
from .table import PairTable

DEFAULT_MODE = ModeContext(name="fundamental")

CANONICAL_PAIRS: tuple[DelimiterPair, ...] = (
    DelimiterPair("(", ")"),
    DelimiterPair("[", "]"),
    DelimiterPair("{", "}"),
    DelimiterPair("<", ">"),
    DelimiterPair('"', '"'),
    DelimiterPair("'", "'"),
)

DEFAULT_MODES: tuple[ModeContext, ...] = (
    DEFAULT_MODE,
    # Lisp docstrings quote symbols as `like-this'.
    ModeContext(name="lisp", overrides=(("`", "'"),), inert=("'",)),
    ModeContext(name="emacs-lisp", overrides=(("`", "'"),), inert=("'",)),
    ModeContext(name="markdown", overrides=(("`", "`"),)),
)


def load_default_pairs(
    table: PairTable,
    *,
    pairs: Iterable[DelimiterPair] = CANONICAL_PAIRS,
    modes: Iterable[ModeContext] = DEFAULT_MODES,
    replace: bool = False,
) -> PairTable:
    for pair in pairs:
        table.register_pair(pair, replace=replace)
    for mode in modes:
        table.register_mode(mode, replace=replace)
    return table


def default_table(*, logger_name: str | None = None) -> PairTable:
    return load_default_pairs(PairTable(logger_name=logger_name))


_SHARED_TABLE: Optional[PairTable] = None


def shared_table() -> PairTable:
    """Process-wide default table used when callers do not pass their own."""

    global _SHARED_TABLE
    if _SHARED_TABLE is None:
        _SHARED_TABLE = default_table(logger_name="rewrap_engine.pairs")
    return _SHARED_TABLE


__all__ = [
    "CANONICAL_PAIRS",
    "DEFAULT_MODE",
    "DEFAULT_MODES",
    "default_table",
    "load_default_pairs",
    "shared_table",
]

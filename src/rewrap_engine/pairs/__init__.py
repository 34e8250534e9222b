"""Delimiter pair table with mode-sensitive overrides."""

from .models import DelimiterPair, ModeContext
from .table import PairTable, PairTableConflictError
from .defaults import DEFAULT_MODE, default_table, load_default_pairs, shared_table

__all__ = [
    "DEFAULT_MODE",
    "DelimiterPair",
    "ModeContext",
    "PairTable",
    "PairTableConflictError",
    "default_table",
    "load_default_pairs",
    "shared_table",
]

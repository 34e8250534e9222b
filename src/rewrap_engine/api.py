"""Pure functions over text snapshots: ``rewrap`` and ``add``.

Each call builds a :class:`SnapshotHost` around ``text``, runs one command
and returns the :class:`RewriteResult`; the input string is never modified.
A ``None`` key cancels the command.
"""

from __future__ import annotations

from typing import Optional

from .engine import RewriteEngine, RewriteResult
from .host import SnapshotHost
from .pairs import DEFAULT_MODE, ModeContext, PairTable, shared_table


def _resolve_mode(mode: ModeContext | str | None, table: PairTable) -> ModeContext:
    if mode is None:
        return DEFAULT_MODE
    if isinstance(mode, str):
        return table.mode(mode)
    return mode


def _run(
    command: str,
    text: str,
    cursor: int,
    key: Optional[str],
    *,
    mode: ModeContext | str | None,
    table: Optional[PairTable],
) -> RewriteResult:
    table = table or shared_table()
    host = SnapshotHost(text, [key], mode=_resolve_mode(mode, table))
    engine = RewriteEngine(host, pair_table=table)
    if command == "rewrap":
        return engine.rewrap(cursor)
    return engine.add(cursor)


def rewrap(
    text: str,
    cursor: int,
    key: Optional[str],
    *,
    mode: ModeContext | str | None = None,
    table: Optional[PairTable] = None,
) -> RewriteResult:
    """Replace the pair enclosing ``cursor`` with the pair for ``key``.

    ``rewrap("(foo-bar)", 5, "[")`` yields text ``"[foo-bar]"`` with the
    cursor still at 5.
    """

    return _run("rewrap", text, cursor, key, mode=mode, table=table)


def add(
    text: str,
    cursor: int,
    key: Optional[str],
    *,
    mode: ModeContext | str | None = None,
    table: Optional[PairTable] = None,
) -> RewriteResult:
    """Wrap the unit adjacent to ``cursor`` in the pair for ``key``."""

    return _run("add", text, cursor, key, mode=mode, table=table)


__all__ = ["add", "rewrap"]

"""Pair table mapping delimiter characters to their counterparts."""

from __future__ import annotations

from typing import Dict, Optional

from rewrap_engine.runtime.telemetry import span

from .models import DelimiterPair, ModeContext


class PairTableConflictError(RuntimeError):
    """Raised when a pair or mode registration collides with an existing entry."""

    def __init__(self, key: str, existing: object) -> None:
        super().__init__(f"'{key}' is already registered as {existing!r}")
        self.key = key
        self.existing = existing


class PairTable:
    """Canonical opening/closing character table plus named mode contexts.

    Lookups never mutate the table; the only inputs are the character and the
    ``ModeContext`` passed by the caller.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._close_by_open: Dict[str, str] = {}
        self._open_by_close: Dict[str, str] = {}
        self._modes: Dict[str, ModeContext] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def register_pair(
        self, pair: DelimiterPair, *, replace: bool = False
    ) -> DelimiterPair:
        if len(pair.open) != 1 or len(pair.close) != 1:
            raise ValueError("table pairs must use single characters")
        with span(
            "pairs::register_pair",
            logger_name=self._logger_name,
            component="pairs",
            metadata={"open": pair.open, "close": pair.close},
        ):
            existing = self._close_by_open.get(pair.open)
            if not replace and existing is not None:
                raise PairTableConflictError(
                    pair.open, DelimiterPair(pair.open, existing)
                )
            self._close_by_open[pair.open] = pair.close
            self._open_by_close[pair.close] = pair.open
            self._revision += 1
            return pair

    def register_mode(
        self, mode: ModeContext, *, replace: bool = False
    ) -> ModeContext:
        with span(
            "pairs::register_mode",
            logger_name=self._logger_name,
            component="pairs",
            metadata={"mode": mode.name, "overrides": len(mode.overrides)},
        ):
            if not replace and mode.name in self._modes:
                raise PairTableConflictError(mode.name, self._modes[mode.name])
            self._modes[mode.name] = mode
            self._revision += 1
            return mode

    def mode(self, name: str) -> ModeContext:
        """Return the registered mode, or a bare context with no overrides."""

        return self._modes.get(name) or ModeContext(name=name)

    def modes(self) -> tuple[str, ...]:
        return tuple(sorted(self._modes))

    def closing_for(
        self, char: str, mode: Optional[ModeContext] = None
    ) -> Optional[str]:
        if mode is not None:
            override = mode.override_close(char)
            if override is not None:
                return override
        if char in self._close_by_open:
            return self._close_by_open[char]
        if char in self._open_by_close:
            return char
        if mode is not None and mode.override_open(char) is not None:
            return char
        return None

    def opening_for(
        self, char: str, mode: Optional[ModeContext] = None
    ) -> Optional[str]:
        # A character that can open something is its own opener; the reverse
        # lookup only applies to pure closers.
        if mode is not None and mode.opens(char):
            return char
        if char in self._close_by_open:
            return char
        if mode is not None:
            override = mode.override_open(char)
            if override is not None:
                return override
        return self._open_by_close.get(char)

    def pair_for(self, char: str, mode: Optional[ModeContext] = None) -> DelimiterPair:
        """Expand any input character into a usable pair; never fails.

        Unmapped characters pair with themselves, so ``pair_for("a")`` is
        ``DelimiterPair("a", "a")``.
        """

        opening = self.opening_for(char, mode)
        if opening is None:
            return DelimiterPair.self_paired(char)
        closing = self.closing_for(opening, mode) or opening
        return DelimiterPair(open=opening, close=closing)

    def bracket_pairs(self, mode: Optional[ModeContext] = None) -> Dict[str, str]:
        """Asymmetric pairs tracked by nesting depth during scans."""

        return {
            opening: closing
            for opening, closing in self._close_by_open.items()
            if opening != closing and _override_free(opening, mode)
        }

    def quote_pairs(self, mode: Optional[ModeContext] = None) -> Dict[str, str]:
        """Pairs that switch the scanner into string state until their closer.

        Symmetric canonical pairs plus every mode override (a backtick that
        closes with an apostrophe behaves like a string, not a bracket).
        """

        quotes = {
            opening: closing
            for opening, closing in self._close_by_open.items()
            if opening == closing and _override_free(opening, mode)
        }
        if mode is not None:
            for opening, closing in mode.overrides:
                quotes.setdefault(opening, closing)
        return quotes


def _override_free(char: str, mode: Optional[ModeContext]) -> bool:
    if mode is None:
        return True
    return char not in mode.inert and mode.override_close(char) is None

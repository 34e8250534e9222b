"""Edit plans: the delimiter edits of one command, computed before mutation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from rewrap_engine.pairs import DelimiterPair
from rewrap_engine.units import MatchedPair, Span


@dataclass(frozen=True, slots=True)
class EditPlan:
    """Removals and insertions expressed in pre-edit offsets.

    ``region`` covers every edit, ``content`` is the text the plan keeps
    untouched and ``content_shift`` is how far that text moves.
    """

    region: Span
    content: Span
    remove_spans: Tuple[Span, ...]
    insertions: Tuple[Tuple[int, str], ...]
    content_shift: int

    @property
    def delta(self) -> int:
        inserted = sum(len(text) for _, text in self.insertions)
        removed = sum(span.length for span in self.remove_spans)
        return inserted - removed

    def apply(self, text: str) -> str:
        """Apply removals (back to front) and then compensated insertions."""

        for span in sorted(self.remove_spans, reverse=True):
            text = text[: span.start] + text[span.end :]
        inserted = 0
        for offset, insertion in sorted(self.insertions, key=lambda item: item[0]):
            removed_before = sum(
                span.length for span in self.remove_spans if span.end <= offset
            )
            position = offset - removed_before + inserted
            text = text[:position] + insertion + text[position:]
            inserted += len(insertion)
        return text

    def replacement(self, text: str) -> str:
        """New text for ``region`` so the whole plan commits as one replace."""

        applied = self.apply(text)
        return applied[self.region.start : self.region.end + self.delta]

    def remap_cursor(self, cursor: int) -> int:
        """Keep ``cursor`` at the same place relative to the untouched content."""

        if cursor < self.region.start:
            return cursor
        if cursor > self.region.end:
            return cursor + self.delta
        if self.content.start <= cursor <= self.content.end:
            return cursor + self.content_shift
        if cursor < self.content.start:
            return self.region.start
        return self.region.end + self.delta


def plan_rewrap(pair: MatchedPair, replacement: DelimiterPair) -> EditPlan:
    """Swap the delimiters of ``pair`` for ``replacement`` in place."""

    opening, closing = pair.open_span, pair.close_span
    return EditPlan(
        region=pair.span,
        content=pair.content,
        remove_spans=(opening, closing),
        insertions=(
            (opening.start, replacement.open),
            (closing.start, replacement.close),
        ),
        content_shift=len(replacement.open) - opening.length,
    )


def plan_add(unit: Span, pair: DelimiterPair) -> EditPlan:
    """Insert ``pair`` around ``unit``."""

    return EditPlan(
        region=unit,
        content=unit,
        remove_spans=(),
        insertions=((unit.start, pair.open), (unit.end, pair.close)),
        content_shift=len(pair.open),
    )

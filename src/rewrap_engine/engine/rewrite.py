"""State machine sequencing rewrap/add commands against an editor host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generator, Iterable, List, NoReturn, Optional, Tuple

from rewrap_engine.host import DelimiterCancelled, EditorHost
from rewrap_engine.pairs import DelimiterPair, PairTable, shared_table
from rewrap_engine.preview import PreviewProjector
from rewrap_engine.runtime import telemetry
from rewrap_engine.units import Span, clamp_offset, find_adjacent_unit
from rewrap_engine.units import find_enclosing_pair

from .errors import EngineBusyError, EngineStateError
from .plan import EditPlan, plan_add, plan_rewrap
from .states import EngineState, can_transition

DEFAULT_CANCEL_KEYS: Tuple[str, ...] = ("\x1b", "\x07", "ESC", "C-g")

Session = Generator[None, Optional[str], "RewriteResult"]


@dataclass(slots=True)
class RewriteResult:
    """Outcome of one command; ``changed`` is false for every no-op status."""

    command: str
    status: str
    text: str
    cursor: int
    span: Optional[Span] = None
    pair: Optional[DelimiterPair] = None
    message: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status in {"rewrapped", "added"}


class PendingCommand:
    """A command suspended at its delimiter prompt.

    Event-driven hosts keep this object between key events and call
    :meth:`feed` (or :meth:`cancel`) once; :meth:`close` abandons the command
    and still tears the preview down.
    """

    def __init__(self, command: str, session: Session) -> None:
        self.command = command
        self.result: Optional[RewriteResult] = None
        self._session = session
        self._closed = False
        self._advance(lambda: next(session))

    @property
    def done(self) -> bool:
        return self.result is not None or self._closed

    def feed(self, key: Optional[str]) -> RewriteResult:
        if self.done:
            raise EngineStateError(f"'{self.command}' is no longer pending")
        self._advance(lambda: self._session.send(key))
        if self.result is None:
            raise EngineStateError(f"'{self.command}' did not finish after its key")
        return self.result

    def cancel(self) -> RewriteResult:
        return self.feed(None)

    def fail(self, exc: BaseException) -> NoReturn:
        """Unwind the command with ``exc``; the session re-raises it."""

        self._closed = True
        self._session.throw(exc)
        raise EngineStateError(f"'{self.command}' kept running after {exc!r}")

    def close(self) -> None:
        if not self.done:
            self._closed = True
            self._session.close()

    def _advance(self, step: Callable[[], None]) -> None:
        try:
            step()
        except StopIteration as stop:
            self.result = stop.value


class RewriteEngine:
    """Drives ``rewrap`` and ``add`` through the engine state machine.

    Parameters
    ----------
    host:
        The editing surface (buffer, key prompt, mode, preview overlays).
    pair_table:
        Table used to resolve delimiters; defaults to the shared table.
    projector:
        Preview registry; defaults to one drawing on ``host``.
    cancel_keys:
        Keys that abort delimiter selection in addition to ``None``.
    """

    def __init__(
        self,
        host: EditorHost,
        *,
        pair_table: Optional[PairTable] = None,
        projector: Optional[PreviewProjector] = None,
        cancel_keys: Iterable[str] = DEFAULT_CANCEL_KEYS,
        logger_name: str = "rewrap_engine.engine",
    ) -> None:
        self.host = host
        self.pair_table = pair_table or shared_table()
        self.projector = projector or PreviewProjector(
            host, logger_name="rewrap_engine.preview"
        )
        self.cancel_keys = frozenset(cancel_keys)
        self.logger = telemetry.get_logger(logger_name)
        self._logger_name = logger_name
        self._state = EngineState.IDLE
        self._pending: Optional[str] = None
        self.trace: List[EngineState] = [EngineState.IDLE]

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._pending is not None

    def rewrap(self, cursor: int) -> RewriteResult:
        """Replace the pair enclosing ``cursor`` with the pair for the next key."""

        return self._drive(self.start_rewrap(cursor))

    def add(self, cursor: int) -> RewriteResult:
        """Wrap the unit adjacent to ``cursor`` in the pair for the next key."""

        return self._drive(self.start_add(cursor))

    def start_rewrap(self, cursor: int) -> PendingCommand:
        return PendingCommand("rewrap", self._session("rewrap", cursor))

    def start_add(self, cursor: int) -> PendingCommand:
        return PendingCommand("add", self._session("add", cursor))

    def _drive(self, pending: PendingCommand) -> RewriteResult:
        if pending.result is not None:
            return pending.result
        try:
            key = self.host.read_char()
        except DelimiterCancelled:
            return pending.cancel()
        except BaseException as exc:
            pending.fail(exc)
        return pending.feed(key)

    def _session(self, command: str, cursor: int) -> Session:
        if self._pending is not None:
            raise EngineBusyError(command, pending=self._pending)
        self._pending = command
        self.trace = [EngineState.IDLE]
        try:
            with telemetry.span(
                f"engine::{command}",
                logger_name=self._logger_name,
                component="engine",
                metadata={"command": command, "cursor": cursor},
            ) as handle:
                result = yield from self._run(command, cursor)
                if not result.changed:
                    handle.cancel(result.status)
            self.projector.assert_clean()
            return result
        finally:
            self._pending = None
            self._state = EngineState.IDLE

    def _run(self, command: str, cursor: int) -> Session:
        mode = self.host.active_mode_context()
        text = self.host.buffer_slice(0, self.host.buffer_length())
        cursor = clamp_offset(text, cursor)

        self._transition(EngineState.RESOLVING, command)
        if command == "rewrap":
            enclosing = find_enclosing_pair(text, cursor, self.pair_table, mode)
            if enclosing is None:
                self._transition(EngineState.ABORTED, command)
                self._transition(EngineState.IDLE, command)
                return self._noop(command, "not_enclosed", text, cursor)
            region = enclosing.span
            preview: Tuple[Span, ...] = (enclosing.open_span, enclosing.close_span)
        else:
            unit = find_adjacent_unit(text, cursor, self.pair_table, mode)
            enclosing = None
            region = unit.span
            preview = (unit.span,)

        self._transition(EngineState.PREVIEWING, command)
        with self.projector.scoped(preview):
            self._transition(EngineState.AWAITING_DELIMITER, command)
            key = yield

        if not key or key in self.cancel_keys:
            self._transition(EngineState.ABORTED, command)
            self._transition(EngineState.IDLE, command)
            return self._noop(command, "cancelled", text, cursor, span=region)

        self._transition(EngineState.PLANNING, command)
        pair = self.pair_table.pair_for(key, mode)
        if not self._region_unchanged(text, region):
            self._transition(EngineState.ABORTED, command)
            self._transition(EngineState.IDLE, command)
            return self._noop(
                command,
                "stale",
                self.host.buffer_slice(0, self.host.buffer_length()),
                cursor,
                span=region,
                message="buffer changed while awaiting a delimiter",
            )
        plan: EditPlan
        if enclosing is not None:
            plan = plan_rewrap(enclosing, pair)
        else:
            plan = plan_add(region, pair)

        self._transition(EngineState.COMMITTING, command)
        self.host.buffer_replace(region.start, region.end, plan.replacement(text))
        new_cursor = plan.remap_cursor(cursor)
        self._transition(EngineState.IDLE, command)
        telemetry.record_event(
            f"engine.{command}",
            data={
                "span": region,
                "open": pair.open,
                "close": pair.close,
                "mode": mode.name,
            },
            logger_name=self._logger_name,
        )
        return RewriteResult(
            command=command,
            status="rewrapped" if command == "rewrap" else "added",
            text=self.host.buffer_slice(0, self.host.buffer_length()),
            cursor=new_cursor,
            span=region,
            pair=pair,
        )

    def _region_unchanged(self, text: str, region: Span) -> bool:
        if self.host.buffer_length() != len(text):
            return False
        current = self.host.buffer_slice(region.start, region.end)
        return current == text[region.start : region.end]

    def _noop(
        self,
        command: str,
        status: str,
        text: str,
        cursor: int,
        *,
        span: Optional[Span] = None,
        message: Optional[str] = None,
    ) -> RewriteResult:
        return RewriteResult(
            command=command,
            status=status,
            text=text,
            cursor=cursor,
            span=span,
            message=message,
        )

    def _transition(self, target: EngineState, command: str) -> None:
        if not can_transition(self._state, target):
            raise EngineStateError(
                f"Illegal transition {self._state.value} -> {target.value}",
                state=self._state,
            )
        telemetry.record_event(
            "engine.transition",
            level="debug",
            data={"command": command, "from": self._state, "to": target},
            logger_name=self._logger_name,
        )
        self._state = target
        self.trace.append(target)

"""Minimal Textual adapter that routes key events through the rewrite engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Mapping, Optional

from rewrap_engine.buffer import BufferMirror
from rewrap_engine.engine import PendingCommand, RewriteEngine, RewriteResult
from rewrap_engine.host import BufferHost

DEFAULT_COMMAND_KEYS: Mapping[str, str] = {
    "ctrl+r": "rewrap",
    "ctrl+t": "add",
}

CANCEL_KEYS = frozenset({"escape", "ctrl+g"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualRewrapAdapter:
    """Bridges Textual key events to engine commands on a ``BufferHost``.

    A command key starts a pending command whose preview stays visible until
    the next key, which is fed to the engine as the delimiter. Other keys edit
    the buffer directly.
    """

    def __init__(
        self,
        engine: RewriteEngine,
        host: BufferHost,
        hooks: TextualUIHooks,
        *,
        command_keys: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.engine = engine
        self.host = host
        self.hooks = hooks
        self.command_keys: Dict[str, str] = dict(command_keys or DEFAULT_COMMAND_KEYS)
        self._pending: Optional[PendingCommand] = None
        self._refresh_buffer()

    @property
    def pending(self) -> Optional[PendingCommand]:
        return self._pending

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> Optional[RewriteResult]:
        """Dispatch one Textual key; returns a result when a command finished."""

        self._log_state("key ->", key=key, text=text, mods=tuple(modifiers))
        if self._pending is not None:
            delimiter = None if key in CANCEL_KEYS else (text or key)
            pending, self._pending = self._pending, None
            return self._finish(pending.feed(delimiter))

        command = self.command_keys.get(key)
        if command is not None:
            return self._start(command)

        self._edit(key, text)
        self._refresh_buffer()
        return None

    def cancel_pending(self) -> Optional[RewriteResult]:
        if self._pending is None:
            return None
        pending, self._pending = self._pending, None
        return self._finish(pending.cancel())

    def _start(self, command: str) -> Optional[RewriteResult]:
        cursor = self.host.buffer.state.cursor
        if command == "rewrap":
            pending = self.engine.start_rewrap(cursor)
        else:
            pending = self.engine.start_add(cursor)
        if pending.result is not None:
            return self._finish(pending.result)
        self._pending = pending
        self.hooks.update_status(f"{command}: type a delimiter (ESC cancels)")
        self.hooks.handle_event(f"{command}.pending", self.host.preview_ranges())
        self._refresh_buffer()
        return None

    def _finish(self, result: RewriteResult) -> RewriteResult:
        if result.changed:
            self.host.buffer.set_cursor(result.cursor)
        self.hooks.update_status(result.message or f"{result.command}:{result.status}")
        self.hooks.handle_event(f"{result.command}.{result.status}", result)
        self._refresh_buffer()
        self._log_state(
            "result <-",
            command=result.command,
            status=result.status,
            cursor=result.cursor,
        )
        return result

    def _edit(self, key: str, text: Optional[str]) -> None:
        buffer = self.host.buffer
        cursor = buffer.state.cursor
        if key == "left":
            buffer.set_cursor(max(0, cursor - 1))
        elif key == "right":
            buffer.set_cursor(min(len(buffer), cursor + 1))
        elif key == "home":
            buffer.set_cursor(0)
        elif key == "end":
            buffer.set_cursor(len(buffer))
        elif key == "backspace" and cursor > 0:
            buffer.delete_range(cursor - 1, cursor)
        elif key == "enter":
            buffer.insert_text("\n")
        elif text and text.isprintable():
            buffer.insert_text(text)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.host.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "state": self.engine.state.value,
            "cursor": self.host.buffer.state.cursor,
            "pending": self._pending.command if self._pending else None,
            "mode": self.host.mode.name,
            "buffer_version": self.host.buffer.document.version,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            if value is not None:
                parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["TextualRewrapAdapter", "TextualUIHooks"]

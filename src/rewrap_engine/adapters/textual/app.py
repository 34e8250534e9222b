"""Executable Textual app that hosts the rewrite engine."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use rewrap_engine.adapters.textual.app"
    ) from exc

from rewrap_engine.buffer import Buffer, BufferMirror
from rewrap_engine.engine import RewriteEngine
from rewrap_engine.host import BufferHost
from rewrap_engine.pairs import shared_table

from .controller import TextualRewrapAdapter, TextualUIHooks

DEFAULT_TEXT = '(cons "foo-bar" baz)'


def render_mirror(mirror: BufferMirror) -> Text:
    """Buffer text with preview ranges highlighted and the cursor reversed."""

    rendered = Text(mirror.text + " ")
    for start, end in mirror.preview:
        rendered.stylize("bold black on yellow", start, max(end, start + 1))
    rendered.stylize("reverse", mirror.cursor, mirror.cursor + 1)
    return rendered


class RewrapApp(App[None]):
    """Minimal Textual UI embedding the rewrite engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = DEFAULT_TEXT, mode: str = "fundamental") -> None:
        super().__init__()
        self._initial_text = text
        self._mode_name = mode
        self.adapter: TextualRewrapAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        table = shared_table()
        buffer = Buffer.from_text(self._initial_text)
        host = BufferHost(buffer, mode=table.mode(self._mode_name))
        engine = RewriteEngine(host, pair_table=table)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
        )
        self.adapter = TextualRewrapAdapter(engine, host, hooks)
        self._update_status("ctrl+r rewrap | ctrl+t add | ctrl+q quit")

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.cancel_pending()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_mirror(mirror))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the rewrite engine demo.")
    parser.add_argument(
        "--text",
        default=DEFAULT_TEXT,
        help="Initial buffer contents",
    )
    parser.add_argument(
        "--mode",
        default="fundamental",
        help="Syntax mode used for delimiter overrides (e.g. lisp, markdown)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    RewrapApp(text=args.text, mode=args.mode).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()

"""Executable Textual app that hosts the editor."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use patchwork.adapters.textual.app"
    ) from exc

from patchwork.buffer import Buffer, BufferMirror
from patchwork.editor import EditorState
from patchwork.highlight import Highlighter, highlighter_for
from patchwork.runtime import telemetry

from .controller import TextualEditorAdapter, TextualUIHooks, display_cursor_index


def render_buffer(mirror: BufferMirror, highlighter: Highlighter) -> Text:
    """Highlighted buffer text with the cursor cell in reverse video."""

    view = Text()
    for span in highlighter.highlight(mirror.text):
        view.append(span.text, style=span.style or None)

    index = display_cursor_index(mirror.text, mirror.cursor_offset)
    if index < len(view.plain) and view.plain[index] != "\n":
        view.stylize("reverse", index, index + 1)
    else:
        # Cursor past the line end gets a visible placeholder cell.
        view = view[:index] + Text(" ", style="reverse") + view[index:]
    return view


@dataclass
class UIState:
    status_text: str = ""
    command_text: str = ""
    debug_text: str = ""


class PatchworkApp(App[None]):
    """Textual UI embedding the piece-table editor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		content-align: left top;
		overflow: auto;
	}

	#debug-line {
		height: auto;
		max-height: 4;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, state: EditorState, *, debug: bool = False) -> None:
        super().__init__()
        self.state = state
        self.show_debug_bar = debug
        self.adapter: TextualEditorAdapter | None = None
        self._ui = UIState()
        self._buffer_widget: Static | None = None
        self._debug_widget: Static | None = None
        self._status_widget: Static | None = None
        self._command_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        if self.show_debug_bar:
            self._debug_widget = Static("", id="debug-line")
            yield self._debug_widget
        self._status_widget = Static("", id="status-line")
        self._command_widget = Static("", id="command-line")
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"patchwork - {self.state.buffer.name}"
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_command=self._show_command,
            show_debug=self._show_debug,
            request_quit=self.exit,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.state, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._buffer_widget:
            highlighter = highlighter_for(self.state.file_type)
            self._buffer_widget.update(render_buffer(mirror, highlighter))

    def _update_status(self, status: str) -> None:
        self._ui.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_command(self, command: str) -> None:
        self._ui.command_text = command
        if self._command_widget:
            self._command_widget.update(command)

    def _show_debug(self, line: str) -> None:
        self._ui.debug_text = line
        if self._debug_widget:
            self._debug_widget.update(line)

    def _log_line(self, line: str) -> None:
        telemetry.get_logger("patchwork.textual").debug(line)


def normalize_key(
    event: events.Key,
) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
    modifiers = []
    ctrl = bool(getattr(event, "ctrl", False))
    alt = bool(getattr(event, "alt", False) or getattr(event, "meta", False))
    if ctrl:
        modifiers.append("CTRL")
    if alt:
        modifiers.append("ALT")
    key = event.key
    if key in {"ctrl+c", "ctrl+q"}:
        return None
    if key == "escape":
        return ("ESC", None, tuple(modifiers))
    if key in {"enter", "return"}:
        return ("ENTER", None, tuple(modifiers))
    if key in {"backspace", "ctrl+h"}:
        return ("BACKSPACE", None, tuple(modifiers))
    if key == "tab":
        return ("TAB", "\t", tuple(modifiers))
    if event.character and event.is_printable:
        return (event.character, event.character, tuple(modifiers))
    return (key.upper(), None, tuple(modifiers))


def load_buffer(path: Optional[str]) -> Buffer:
    """Open ``path``; a file that does not exist yet becomes an empty buffer."""

    if path is None:
        return Buffer(name="[No Name]")
    try:
        return Buffer.from_file(path)
    except FileNotFoundError:
        telemetry.record_event("buffer.new_file", data={"path": path})
        return Buffer(name=Path(path).name, path=path)


def _env_flag(key: str) -> bool:
    return os.environ.get(key, "").lower() in {"1", "true", "yes", "on"}


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="patchwork", description="Edit a file in the patchwork editor."
    )
    parser.add_argument("path", nargs="?", help="File to open (created on :w)")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_env_flag("PATCHWORK_DEBUG"),
        help="Show the piece/line-start debug bar",
    )
    parser.add_argument(
        "--telemetry-preset",
        choices=telemetry.preset_names(),
        default=os.environ.get("PATCHWORK_TELEMETRY_PRESET"),
        help="telelog preset (default: environment-driven, console off)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.telemetry_preset, console=False)
    try:
        buffer = load_buffer(args.path)
    except (OSError, UnicodeDecodeError) as exc:
        telemetry.record_event(
            "buffer.load_failed", level="error", data={"path": args.path, "error": exc}
        )
        reason = getattr(exc, "strerror", None) or exc
        print(f"patchwork: cannot open {args.path}: {reason}", file=sys.stderr)
        raise SystemExit(1) from exc

    app = PatchworkApp(EditorState.for_buffer(buffer), debug=args.debug)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
